"""
provider.py

Providers publish an info set and create services by name or selector;
ProviderCollection puts several providers behind one lookup.

Design Invariants:
- Providers and contexts are immutable
- A collection needs at least one provider and a non-blank label
- Names published by more than one provider are detected lazily, at
  lookup, and raise AmbiguousNameError
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pluginalias.errors import (
    AmbiguousNameError,
    EmptyProvidersError,
    ImmutabilityError,
    InvalidLabelError,
    UnknownEnvironmentValueError,
    UnknownNameError,
)
from pluginalias.helper import PluginHelper
from pluginalias.info import PluginInfo, PluginInfoSet
from pluginalias.mapper import ProviderMapper
from pluginalias.name import PluginName
from pluginalias.selector import Selector

logger = logging.getLogger(__name__)

# (values, context) -> service
ServiceFactory = Callable[[List[Any], "ProviderContext"], Any]


# =============================================================================
# ProviderContext
# =============================================================================

class ProviderContext:
    """Read-only environment values available while creating services."""

    __slots__ = ('_environment', '_frozen')

    def __init__(self, environment: Optional[Mapping[str, Any]] = None):
        object.__setattr__(self, '_environment', dict(environment or {}))
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("ProviderContext", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("ProviderContext", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    def environment_value(self, name: str) -> Any:
        """
        Raises:
            UnknownEnvironmentValueError: If name has no value
        """
        if name not in self._environment:
            raise UnknownEnvironmentValueError(name)
        return self._environment[name]

    def set_environment_value(self, name: str, value: Any) -> "ProviderContext":
        if name in self._environment and self._environment[name] == value:
            return self
        environment = dict(self._environment)
        environment[name] = value
        return ProviderContext(environment)

    @property
    def environment(self) -> Dict[str, Any]:
        """Return a copy of the environment values."""
        return dict(self._environment)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProviderContext):
            return NotImplemented
        return self._environment == other._environment

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._environment)))

    def __repr__(self) -> str:
        return f"ProviderContext({self._environment!r})"


# =============================================================================
# Providers
# =============================================================================

class Provider(ABC):
    """Publishes infos and creates the services they describe."""

    @abstractmethod
    def infos(self) -> PluginInfoSet:
        """The infos this provider publishes."""

    @abstractmethod
    def get(self, selector: Selector, context: ProviderContext) -> Any:
        """Create the service a selector names, evaluating its parameters."""

    @abstractmethod
    def get_named(self, name: PluginName, values: List[Any], context: ProviderContext) -> Any:
        """Create the service name refers to, with already evaluated values."""


class BasicProvider(Provider):
    """
    A provider backed by a table of factories.

    Every published info needs a factory; factory keys may be names or
    plain strings.
    """

    def __init__(
        self,
        infos: PluginInfoSet,
        factories: Mapping[Union[PluginName, str], ServiceFactory],
        helper: Optional[PluginHelper] = None,
    ):
        self._helper = helper if helper is not None else PluginHelper()
        self._infos = infos
        self._factories: Dict[PluginName, ServiceFactory] = {}
        for key, factory in factories.items():
            name = key if isinstance(key, PluginName) else self._helper.parse_name(key)
            self._factories[name] = factory

        missing = [i.name.value for i in infos if i.name not in self._factories]
        if missing:
            raise ValueError(f"Missing factory for {', '.join(missing)}")

    def infos(self) -> PluginInfoSet:
        return self._infos

    def get(self, selector: Selector, context: ProviderContext) -> Any:
        values = selector.evaluate_value_text(context)
        return self.get_named(selector.name, values, context)

    def get_named(self, name: PluginName, values: List[Any], context: ProviderContext) -> Any:
        if not self._infos.contains_name(name):
            raise self._helper.unknown_name(name)
        return self._factories[name](list(values), context)

    def __repr__(self) -> str:
        return f"BasicProvider({self._infos.text()!r})"


class MappedProvider(Provider):
    """Exposes another provider through a ProviderMapper."""

    def __init__(self, provider: Provider, mapper: ProviderMapper):
        self._provider = provider
        self._mapper = mapper

    def infos(self) -> PluginInfoSet:
        return self._mapper.infos()

    def get(self, selector: Selector, context: ProviderContext) -> Any:
        return self._provider.get(self._mapper.selector(selector), context)

    def get_named(self, name: PluginName, values: List[Any], context: ProviderContext) -> Any:
        return self._provider.get_named(self._mapper.name(name), values, context)

    def __repr__(self) -> str:
        return f"MappedProvider({self._provider!r}, {self._mapper!r})"


# =============================================================================
# ProviderCollection
# =============================================================================

class ProviderCollection:
    """
    Several providers behind one dispatch surface.

    Each lookup finds the single provider publishing the requested name.
    """

    def __init__(self, providers: Iterable[Provider], label: str):
        if not isinstance(label, str) or not label.strip():
            raise InvalidLabelError(label)

        providers = tuple(providers)
        if not providers:
            raise EmptyProvidersError(label)
        for provider in providers:
            if not isinstance(provider, Provider):
                raise TypeError(f"Expected Provider, got {type(provider).__name__}")

        self._providers = providers
        self._label = label

    @property
    def label(self) -> str:
        return self._label

    @property
    def providers(self) -> Tuple[Provider, ...]:
        return self._providers

    def provider(self, name: PluginName) -> Provider:
        """
        Find the one provider publishing name.

        Raises:
            UnknownNameError: If no provider publishes name
            AmbiguousNameError: If more than one does
        """
        found = [p for p in self._providers if p.infos().contains_name(name)]
        if not found:
            raise UnknownNameError(self._label, str(name))
        if len(found) > 1:
            raise AmbiguousNameError(self._label, str(name), len(found))
        logger.debug("Resolved %s %s to %r", self._label, name, found[0])
        return found[0]

    def get(self, selector: Selector, context: ProviderContext) -> Any:
        return self.provider(selector.name).get(selector, context)

    def get_named(self, name: PluginName, values: List[Any], context: ProviderContext) -> Any:
        return self.provider(name).get_named(name, values, context)

    def infos(self) -> Tuple[PluginInfo, ...]:
        """
        Every info of every provider, sorted.

        Unlike a PluginInfoSet this keeps infos published by more than one
        provider, so conflicts stay visible.
        """
        collected = []
        for provider in self._providers:
            collected.extend(provider.infos())
        return tuple(sorted(collected))

    def __repr__(self) -> str:
        return f"ProviderCollection({self._label!r}, {len(self._providers)} providers)"
