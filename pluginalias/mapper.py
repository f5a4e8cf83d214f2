"""
mapper.py

Provider mapping: reconciles a locally declared info set with the infos a
provider publishes, matching entries by url.

Design Invariants:
- One ProviderMapper serves every MappingPolicy, so lookup and error
  handling exist once
- Resolution never changes a selector's parameter text
- Unknown names always raise UnknownNameError carrying the helper label
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable

from pluginalias.alias_set import PluginAliasSet
from pluginalias.errors import ImmutabilityError
from pluginalias.helper import PluginHelper
from pluginalias.info import PluginInfoSet
from pluginalias.name import PluginName
from pluginalias.name_set import PluginNameSet
from pluginalias.selector import Selector

logger = logging.getLogger(__name__)


class MappingPolicy(Enum):
    """How local infos combine with provider infos."""
    FILTERED = "filtered"
    RENAMING = "renaming"
    MERGED = "merged"

    @classmethod
    def from_string(cls, value: str) -> "MappingPolicy":
        return cls(value.lower())


class ProviderMapper:
    """
    Resolves external names and selectors to provider names.

    FILTERED
        local infos act as an allow-list; only names whose url the provider
        also publishes resolve, and infos() lists those local infos.
    RENAMING
        local infos rename provider infos sharing a url; a name resolves
        through the renames first, then directly against the provider.
        infos() is the provider's infos with renames applied.
    MERGED
        resolves like RENAMING; infos() also lists local-only infos.
    """

    __slots__ = ('_policy', '_helper', '_names', '_infos', '_frozen')

    def __init__(
        self,
        policy: MappingPolicy,
        local_infos: PluginInfoSet,
        provider_infos: PluginInfoSet,
        helper: PluginHelper,
    ):
        if not isinstance(policy, MappingPolicy):
            raise TypeError(f"policy must be MappingPolicy, got {type(policy).__name__}")
        if not isinstance(helper, PluginHelper):
            raise TypeError(f"helper must be PluginHelper, got {type(helper).__name__}")

        names: Dict[PluginName, PluginName] = {}

        if policy is MappingPolicy.FILTERED:
            for info in local_infos:
                provider_info = provider_infos.get_by_url(info.url)
                if provider_info is not None:
                    names[info.name] = provider_info.name
            infos = local_infos.filter(provider_infos)
        else:
            for info in provider_infos:
                names.setdefault(info.name, info.name)
            for info in provider_infos:
                local_info = local_infos.get_by_url(info.url)
                if local_info is not None:
                    names[local_info.name] = info.name

            if policy is MappingPolicy.RENAMING:
                infos = provider_infos.rename_if_present(local_infos)
            else:
                infos = local_infos.merge_view(provider_infos)

        logger.debug(
            "%s %s mapper: %d local, %d provider, %d visible",
            helper.label, policy.value, len(local_infos), len(provider_infos), len(infos),
        )

        object.__setattr__(self, '_policy', policy)
        object.__setattr__(self, '_helper', helper)
        object.__setattr__(self, '_names', names)
        object.__setattr__(self, '_infos', infos)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("ProviderMapper", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("ProviderMapper", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    @classmethod
    def from_aliases(
        cls,
        policy: MappingPolicy,
        aliases: PluginAliasSet,
        provider_infos: PluginInfoSet,
    ) -> "ProviderMapper":
        """Build a mapper whose local view is the alias set merged with the provider."""
        return cls(policy, aliases.merge(provider_infos), provider_infos, aliases.helper)

    @property
    def policy(self) -> MappingPolicy:
        return self._policy

    def name(self, name: PluginName) -> PluginName:
        """
        Raises:
            UnknownNameError: If name does not resolve
        """
        provider_name = self._names.get(name)
        if provider_name is None:
            raise self._helper.unknown_name(name)
        return provider_name

    def selector(self, selector: Selector) -> Selector:
        return selector.set_name(self.name(selector.name))

    def infos(self) -> PluginInfoSet:
        return self._infos

    def __repr__(self) -> str:
        return f"ProviderMapper({self._policy.name}, {self._infos.text()!r})"

    def __str__(self) -> str:
        return self._infos.text()


class FilteredProviderGuard:
    """An allow-list of names; anything else is unknown."""

    __slots__ = ('_names', '_helper', '_frozen')

    def __init__(self, names: Iterable[PluginName], helper: PluginHelper):
        object.__setattr__(self, '_names', PluginNameSet(names))
        object.__setattr__(self, '_helper', helper)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("FilteredProviderGuard", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("FilteredProviderGuard", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    @property
    def names(self) -> PluginNameSet:
        return self._names

    def name(self, name: PluginName) -> PluginName:
        if name not in self._names:
            raise self._helper.unknown_name(name)
        return name

    def selector(self, selector: Selector) -> Selector:
        self.name(selector.name)
        return selector

    def __repr__(self) -> str:
        return f"FilteredProviderGuard({self._names.text()!r})"

    def __str__(self) -> str:
        return self._names.text()
