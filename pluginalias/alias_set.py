"""
alias_set.py

PluginAliasSet: a parsed, validated alias list and the indexes derived
from it.

The text form is a comma separated list where every entry is one of::

    name
    alias selector
    alias selector url

for example ``plugin111, alias222 plugin222("Hello", $Locale) https://example.com/222``.

Design Invariants:
- Immutable after creation; edits return a new set, or the same set when
  nothing changed
- No name appears twice as an alias or plain name
- Two aliases without their own url never rename the same target
- Alias urls are unique
- Entries iterate in natural order and text() is canonical, so parsing
  text() reproduces an equal set
"""

import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from pluginalias.alias import PluginAlias
from pluginalias.errors import (
    AliasParametersError,
    DuplicateAliasError,
    DuplicateAliasTargetError,
    DuplicateUrlError,
    ImmutabilityError,
)
from pluginalias.helper import PluginHelper
from pluginalias.info import PluginInfo, PluginInfoSet
from pluginalias.name import PluginName
from pluginalias.name_set import PluginNameSet
from pluginalias.parser import PluginExpressionParser
from pluginalias.selector import Selector
from pluginalias.url import AbsoluteUrl

logger = logging.getLogger(__name__)

SEPARATOR = ", "

DEFAULT_HELPER = PluginHelper()


class PluginAliasSet:
    """
    Immutable, validated set of PluginAlias entries.

    Derived indexes:
    - alias_to_selector: alias name -> the selector it stands for
    - alias_selector_names: every alias name that has a selector
    - name_to_name: identity map of every plain pass-through name
    - names: pass-through names plus every selector target
    - aliases_without_infos: aliases that rely on the provider's url
    - infos: the infos introduced by aliases carrying their own url
    """

    __slots__ = (
        '_aliases',
        '_helper',
        '_alias_to_selector',
        '_alias_to_url',
        '_name_to_name',
        '_names',
        '_aliases_without_infos',
        '_infos',
        '_text',
        '_frozen',
    )

    def __init__(
        self,
        aliases: Iterable[PluginAlias] = (),
        helper: Optional[PluginHelper] = None,
    ):
        helper = helper if helper is not None else DEFAULT_HELPER
        if not isinstance(helper, PluginHelper):
            raise TypeError(f"helper must be PluginHelper, got {type(helper).__name__}")

        entries = []
        for alias in aliases:
            if not isinstance(alias, PluginAlias):
                raise TypeError(f"Expected PluginAlias, got {type(alias).__name__}")
            entries.append(alias)

        policy = helper.case_sensitivity

        def sort_key(alias: PluginAlias):
            selector = alias.selector
            url = alias.url
            return (
                policy.key(alias.name.value),
                selector is not None,
                policy.key(selector.name.value) if selector is not None else "",
                selector.parameter_text if selector is not None else "",
                url is not None,
                url.text if url is not None else "",
            )

        entries.sort(key=sort_key)

        alias_to_selector: Dict[PluginName, Selector] = {}
        alias_to_url: Dict[PluginName, AbsoluteUrl] = {}
        name_to_name: Dict[PluginName, PluginName] = {}
        target_to_alias: Dict[PluginName, PluginName] = {}
        seen_urls = set()

        for alias in entries:
            name = alias.name
            if name in alias_to_selector or name in name_to_name:
                raise DuplicateAliasError(name.value)

            selector = alias.selector
            if selector is None:
                name_to_name[name] = name
                continue

            alias_to_selector[name] = selector

            url = alias.url
            if url is not None:
                if url in seen_urls:
                    raise DuplicateUrlError(url.text)
                seen_urls.add(url)
                alias_to_url[name] = url
            else:
                other = target_to_alias.get(selector.name)
                if other is not None:
                    raise DuplicateAliasTargetError(other.value, name.value)
                target_to_alias[selector.name] = name

        # an alias without its own url would publish the same info as the plain name
        for target, alias_name in target_to_alias.items():
            if target in name_to_name:
                raise DuplicateAliasError(alias_name.value)

        object.__setattr__(self, '_aliases', tuple(entries))
        object.__setattr__(self, '_helper', helper)
        object.__setattr__(self, '_alias_to_selector', alias_to_selector)
        object.__setattr__(self, '_alias_to_url', alias_to_url)
        object.__setattr__(self, '_name_to_name', name_to_name)
        # derived sets are built on first use
        object.__setattr__(self, '_names', None)
        object.__setattr__(self, '_aliases_without_infos', None)
        object.__setattr__(self, '_infos', None)
        object.__setattr__(self, '_text', None)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginAliasSet", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginAliasSet", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str, helper: Optional[PluginHelper] = None) -> "PluginAliasSet":
        """
        Parse alias list text in a single left-to-right pass.

        Blank text is the empty set. Whitespace is free around commas and
        between the parts of an entry, including before a parameter list.

        Raises:
            InvalidCharacterError: At the first character that cannot
                continue the list (a trailing comma reports the last character)
            UnterminatedError: For an unclosed quoted string or parameter list
            PluginValidationError: For duplicates found once the list is read
        """
        helper = helper if helper is not None else DEFAULT_HELPER
        parser = PluginExpressionParser(text, helper.case_sensitivity)
        aliases: List[PluginAlias] = []

        parser.spaces()
        if parser.is_empty():
            return cls((), helper)

        while True:
            name = parser.name()
            if name is None:
                raise parser.invalid_character()
            parser.spaces()

            selector = cls._consume_selector(parser)
            url = None
            if selector is not None:
                parser.spaces()
                url = parser.url()
                parser.spaces()

            aliases.append(PluginAlias(name, selector, url))

            if parser.is_empty():
                break
            if not parser.parameter_separator():
                raise parser.invalid_character()
            parser.spaces()

        return cls(aliases, helper)

    @staticmethod
    def _consume_selector(parser: PluginExpressionParser) -> Optional[Selector]:
        name = parser.name()
        if name is None:
            return None
        return Selector(name, parser.selector_parameter_text())

    @classmethod
    def from_infos(
        cls,
        infos: PluginInfoSet,
        helper: Optional[PluginHelper] = None,
    ) -> "PluginAliasSet":
        """An alias set listing every info name as a plain name."""
        return cls((PluginAlias(i.name) for i in infos), helper)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def aliases(self) -> Tuple[PluginAlias, ...]:
        return self._aliases

    @property
    def helper(self) -> PluginHelper:
        return self._helper

    @property
    def alias_to_selector(self) -> Dict[PluginName, Selector]:
        """Return a copy of the alias -> selector map."""
        return dict(self._alias_to_selector)

    @property
    def alias_selector_names(self) -> PluginNameSet:
        return PluginNameSet(self._alias_to_selector.keys())

    @property
    def name_to_name(self) -> Dict[PluginName, PluginName]:
        """Return a copy of the pass-through name map."""
        return dict(self._name_to_name)

    @property
    def names(self) -> PluginNameSet:
        if self._names is None:
            names = list(self._name_to_name)
            names.extend(s.name for s in self._alias_to_selector.values())
            object.__setattr__(self, '_names', PluginNameSet(names))
        return self._names

    @property
    def aliases_without_infos(self) -> PluginNameSet:
        if self._aliases_without_infos is None:
            without = PluginNameSet(
                a for a in self._alias_to_selector if a not in self._alias_to_url
            )
            object.__setattr__(self, '_aliases_without_infos', without)
        return self._aliases_without_infos

    @property
    def infos(self) -> PluginInfoSet:
        if self._infos is None:
            infos = PluginInfoSet(
                PluginInfo(url, alias) for alias, url in self._alias_to_url.items()
            )
            object.__setattr__(self, '_infos', infos)
        return self._infos

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def alias_selector(self, alias: PluginName) -> Optional[Selector]:
        return self._alias_to_selector.get(alias)

    def name(self, name: PluginName) -> Optional[PluginName]:
        return self._name_to_name.get(name)

    def alias_or_name(self, alias_or_name: PluginName) -> Optional[PluginName]:
        """The provider name an alias or plain name stands for, if listed."""
        selector = self._alias_to_selector.get(alias_or_name)
        if selector is not None:
            return selector.name
        return self._name_to_name.get(alias_or_name)

    def contains_alias_or_name(self, alias_or_name: PluginName) -> bool:
        return alias_or_name in self._alias_to_selector or alias_or_name in self._name_to_name

    def selector(self, selector: Selector) -> Selector:
        """
        Resolve a selector through this set.

        An alias is replaced by the selector it stands for, carrying the
        caller's parameter text across when the alias has none of its own.
        A plain name is returned unchanged.

        Raises:
            AliasParametersError: If both the alias and the caller supply parameters
            UnknownNameError: If the name is neither an alias nor a plain name
        """
        name = selector.name
        alias_selector = self._alias_to_selector.get(name)
        if alias_selector is not None:
            if selector.parameter_text:
                if alias_selector.parameter_text:
                    raise AliasParametersError(name.value)
                return alias_selector.set_parameter_text(selector.parameter_text)
            return alias_selector

        if name in self._name_to_name:
            return selector

        raise self._helper.unknown_name(name)

    # -------------------------------------------------------------------------
    # Merge
    # -------------------------------------------------------------------------

    def merge(self, provider_infos: PluginInfoSet) -> PluginInfoSet:
        """
        Compute the infos visible through this alias set.

        Plain names present in the provider pass through unchanged. Each
        alias whose target the provider publishes appears under the alias
        name, with its own url or else the target's url. Anything the
        provider does not publish is dropped, and nothing unlisted is added.
        Provider names are matched under this set's case policy.

        Raises:
            DuplicateUrlError, DuplicateNameError: If the visible infos collide
        """
        label = self._helper.label
        key = self._helper.case_sensitivity.key
        provided = {key(info.name.value): info for info in provider_infos}
        merged = []

        for name in self._name_to_name:
            info = provided.get(key(name.value))
            if info is None:
                logger.debug("Dropping %s %s missing from provider", label, name)
                continue
            merged.append(info)

        for alias, selector in self._alias_to_selector.items():
            target = provided.get(key(selector.name.value))
            if target is None:
                logger.debug(
                    "Dropping %s alias %s, target %s missing from provider",
                    label, alias, selector.name,
                )
                continue
            url = self._alias_to_url.get(alias, target.url)
            merged.append(PluginInfo(url, alias))

        return PluginInfoSet(merged)

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def set_elements(self, aliases: Iterable[PluginAlias]) -> "PluginAliasSet":
        candidate = PluginAliasSet(aliases, self._helper)
        return self if candidate == self else candidate

    def concat(self, alias: PluginAlias) -> "PluginAliasSet":
        if alias in self._aliases:
            return self
        return self.set_elements(self._aliases + (alias,))

    def concat_all(self, aliases: Iterable[PluginAlias]) -> "PluginAliasSet":
        added = tuple(a for a in aliases if a not in self._aliases)
        if not added:
            return self
        return self.set_elements(self._aliases + added)

    def concat_or_replace(self, alias: PluginAlias) -> "PluginAliasSet":
        """Add alias, replacing any entry with the same name."""
        kept = tuple(a for a in self._aliases if a.name != alias.name)
        return self.set_elements(kept + (alias,))

    def delete(self, alias: PluginAlias) -> "PluginAliasSet":
        return self.set_elements(a for a in self._aliases if a != alias)

    def delete_all(self, aliases: Iterable[PluginAlias]) -> "PluginAliasSet":
        remove = list(aliases)
        return self.set_elements(a for a in self._aliases if a not in remove)

    def replace(self, old: PluginAlias, new: PluginAlias) -> "PluginAliasSet":
        if old not in self._aliases:
            return self
        return self.set_elements(new if a == old else a for a in self._aliases)

    def delete_alias_or_name(self, alias_or_name: PluginName) -> "PluginAliasSet":
        """Remove every entry named alias_or_name or targeting it."""
        return self.delete_alias_or_name_all([alias_or_name])

    def delete_alias_or_name_all(self, names: Iterable[PluginName]) -> "PluginAliasSet":
        names = list(names)
        return self.set_elements(
            a for a in self._aliases if not _matches(a, names)
        )

    def keep_alias_or_name_all(self, names: Iterable[PluginName]) -> "PluginAliasSet":
        """Keep only the entries named by, or targeting, one of names."""
        names = list(names)
        return self.set_elements(a for a in self._aliases if _matches(a, names))

    # -------------------------------------------------------------------------
    # Collection Protocol
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[PluginAlias]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, alias: object) -> bool:
        return alias in self._aliases

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluginAliasSet):
            return NotImplemented
        return self._aliases == other._aliases

    def __hash__(self) -> int:
        return hash(self._aliases)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def text(self) -> str:
        """
        Canonical text: entries in order joined by ", ".

        An entry ending in a url is followed by a space so the separator
        never reads as part of the url.
        """
        if self._text is None:
            text = SEPARATOR.join(a.text_and_space() for a in self._aliases).strip()
            object.__setattr__(self, '_text', text)
        return self._text

    def to_json(self) -> str:
        """Alias sets marshal to their text as a JSON string."""
        return json.dumps(self.text())

    @classmethod
    def from_json(cls, json_str: str, helper: Optional[PluginHelper] = None) -> "PluginAliasSet":
        text = json.loads(json_str)
        if not isinstance(text, str):
            raise TypeError(f"Expected string, got {type(text).__name__}")
        return cls.parse(text, helper)

    def tree_print(self, printer) -> None:
        for alias in self._aliases:
            alias.tree_print(printer)

    def __repr__(self) -> str:
        return f"PluginAliasSet({self.text()!r})"

    def __str__(self) -> str:
        return self.text()


def _matches(alias: PluginAlias, names: List[PluginName]) -> bool:
    return alias.name in names or (
        alias.selector is not None and alias.selector.name in names
    )
