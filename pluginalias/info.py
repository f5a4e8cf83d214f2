"""
info.py

PluginInfo and PluginInfoSet: the capabilities a provider publishes, each
a canonical url paired with a name.

Design Invariants:
- Immutable after creation; every edit returns a new set, or the same set
  when nothing changed
- Within a set both the url and the name of every info are unique,
  checked independently
- Sets iterate in natural order: by name, then by url
- Text form is ``<url> <name>`` joined by ``", "``
"""

import json
from typing import Any, Callable, Dict, FrozenSet, Iterable, Iterator, Optional, Tuple

from pluginalias.errors import (
    DuplicateNameError,
    DuplicateUrlError,
    ImmutabilityError,
)
from pluginalias.name import CaseSensitivity, PluginName
from pluginalias.name_set import PluginNameSet
from pluginalias.parser import NON_SPACE_PATTERN, PluginExpressionParser
from pluginalias.url import AbsoluteUrl


# =============================================================================
# PluginInfo
# =============================================================================

class PluginInfo:
    """An immutable (url, name) pair ordered by name, then url."""

    __slots__ = ('_url', '_name', '_frozen')

    def __init__(self, url: AbsoluteUrl, name: PluginName):
        if not isinstance(url, AbsoluteUrl):
            raise TypeError(f"url must be AbsoluteUrl, got {type(url).__name__}")
        if not isinstance(name, PluginName):
            raise TypeError(f"name must be PluginName, got {type(name).__name__}")

        object.__setattr__(self, '_url', url)
        object.__setattr__(self, '_name', name)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginInfo", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginInfo", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    @classmethod
    def parse(
        cls,
        text: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginInfo":
        """
        Parse ``<url> <name>``.

        Raises:
            InvalidUrlError: If the first token is not an absolute url
            InvalidCharacterError: If the name is missing or malformed
        """
        parser = PluginExpressionParser(text, case_sensitivity)
        parser.spaces()
        info = cls.consume(parser)
        parser.spaces()
        if not parser.is_empty():
            raise parser.invalid_character()
        return info

    @classmethod
    def consume(cls, parser: PluginExpressionParser) -> "PluginInfo":
        """Read one info at the parser's cursor."""
        match = NON_SPACE_PATTERN.match(parser.text, parser.pos)
        if not match:
            raise parser.invalid_character("missing url")
        # stops at a separator so "url name,url name" still splits
        token = match.group().split(",", 1)[0]
        if not token:
            raise parser.invalid_character("missing url")
        url = AbsoluteUrl.parse(token)
        parser.pos = match.start() + len(token)

        if not parser.spaces():
            raise parser.invalid_character("missing name")
        name = parser.name()
        if name is None:
            raise parser.invalid_character("missing name")
        return cls(url, name)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def url(self) -> AbsoluteUrl:
        return self._url

    @property
    def name(self) -> PluginName:
        return self._name

    def set_name(self, name: PluginName) -> "PluginInfo":
        if name == self._name and name.value == self._name.value:
            return self
        return PluginInfo(self._url, name)

    def text(self) -> str:
        return f"{self._url.text} {self._name.value}"

    # -------------------------------------------------------------------------
    # Comparison Methods
    # -------------------------------------------------------------------------

    def _key(self):
        return (self._name, self._url)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluginInfo):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "PluginInfo") -> bool:
        if not isinstance(other, PluginInfo):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: "PluginInfo") -> bool:
        if not isinstance(other, PluginInfo):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: "PluginInfo") -> bool:
        if not isinstance(other, PluginInfo):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: "PluginInfo") -> bool:
        if not isinstance(other, PluginInfo):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, str]:
        return {
            "url": self._url.text,
            "name": self._name.value,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginInfo":
        if not isinstance(data, dict):
            raise TypeError(f"Expected dict, got {type(data).__name__}")
        missing = [k for k in ("url", "name") if k not in data]
        if missing:
            raise ValueError(f"PluginInfo missing field(s): {', '.join(missing)}")
        return cls(
            AbsoluteUrl.parse(data["url"]),
            PluginName.parse(data["name"], case_sensitivity),
        )

    @classmethod
    def from_json(
        cls,
        json_str: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginInfo":
        return cls.from_dict(json.loads(json_str), case_sensitivity)

    # -------------------------------------------------------------------------
    # String Representations
    # -------------------------------------------------------------------------

    def tree_print(self, printer) -> None:
        printer.println(self.text())

    def __repr__(self) -> str:
        return f"PluginInfo({self.text()!r})"

    def __str__(self) -> str:
        return self.text()


# =============================================================================
# PluginInfoSet
# =============================================================================

class PluginInfoSet:
    """
    Immutable set of PluginInfo with unique urls and unique names.

    Exact duplicates collapse; two different infos sharing a url or a name
    raise DuplicateUrlError or DuplicateNameError.
    """

    __slots__ = ('_infos', '_by_name', '_by_url', '_frozen')

    def __init__(self, infos: Iterable[PluginInfo] = ()):
        ordered = []
        for info in infos:
            if not isinstance(info, PluginInfo):
                raise TypeError(f"Expected PluginInfo, got {type(info).__name__}")
            ordered.append(info)
        ordered = sorted(set(ordered), key=_sort_key)

        by_url: Dict[AbsoluteUrl, PluginInfo] = {}
        by_name: Dict[PluginName, PluginInfo] = {}
        for info in ordered:
            if info.url in by_url:
                raise DuplicateUrlError(info.url.text)
            by_url[info.url] = info

            if info.name in by_name:
                raise DuplicateNameError(info.name.value)
            by_name[info.name] = info

        object.__setattr__(self, '_infos', tuple(ordered))
        object.__setattr__(self, '_by_name', by_name)
        object.__setattr__(self, '_by_url', by_url)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginInfoSet", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginInfoSet", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    @classmethod
    def parse(
        cls,
        text: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginInfoSet":
        """
        Parse comma separated ``<url> <name>`` entries; blank text is empty.

        Raises:
            InvalidUrlError, InvalidCharacterError: For malformed entries
            DuplicateUrlError, DuplicateNameError: For colliding entries
        """
        parser = PluginExpressionParser(text, case_sensitivity)
        infos = []

        parser.spaces()
        if parser.is_empty():
            return cls()

        while True:
            infos.append(PluginInfo.consume(parser))

            parser.spaces()
            if parser.is_empty():
                break
            if not parser.parameter_separator():
                raise parser.invalid_character()
            parser.spaces()

        return cls(infos)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def infos(self) -> Tuple[PluginInfo, ...]:
        return self._infos

    @property
    def names(self) -> PluginNameSet:
        return PluginNameSet(self._by_name.keys())

    @property
    def urls(self) -> FrozenSet[AbsoluteUrl]:
        return frozenset(self._by_url.keys())

    def get(self, name: PluginName) -> Optional[PluginInfo]:
        return self._by_name.get(name)

    def get_by_url(self, url: AbsoluteUrl) -> Optional[PluginInfo]:
        return self._by_url.get(url)

    def contains_name(self, name: PluginName) -> bool:
        return name in self._by_name

    def contains_url(self, url: AbsoluteUrl) -> bool:
        return url in self._by_url

    def is_empty(self) -> bool:
        return not self._infos

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def set_elements(self, infos: Iterable[PluginInfo]) -> "PluginInfoSet":
        candidate = PluginInfoSet(infos)
        return self if candidate == self else candidate

    def concat(self, info: PluginInfo) -> "PluginInfoSet":
        return self.set_elements(self._infos + (info,))

    def concat_all(self, infos: Iterable[PluginInfo]) -> "PluginInfoSet":
        return self.set_elements(self._infos + tuple(infos))

    def delete(self, info: PluginInfo) -> "PluginInfoSet":
        return self.set_elements(i for i in self._infos if i != info)

    def delete_all(self, infos: Iterable[PluginInfo]) -> "PluginInfoSet":
        remove = set(infos)
        return self.set_elements(i for i in self._infos if i not in remove)

    def replace(self, old: PluginInfo, new: PluginInfo) -> "PluginInfoSet":
        if old not in self._infos:
            return self
        return self.set_elements(new if i == old else i for i in self._infos)

    def filter(self, other: "PluginInfoSet") -> "PluginInfoSet":
        """Keep only the infos whose url also appears in other."""
        return self.set_elements(i for i in self._infos if other.contains_url(i.url))

    def rename_if_present(self, other: "PluginInfoSet") -> "PluginInfoSet":
        """Replace every info sharing a url with other by other's version."""
        return self.set_elements(
            other.get_by_url(i.url) or i for i in self._infos
        )

    def union(self, other: "PluginInfoSet") -> "PluginInfoSet":
        return self.set_elements(self._infos + other._infos)

    def difference(self, other: "PluginInfoSet") -> "PluginInfoSet":
        remove = set(other._infos)
        return self.set_elements(i for i in self._infos if i not in remove)

    def merge_view(self, target: "PluginInfoSet") -> "PluginInfoSet":
        """
        Combine this set, viewed as renames, with a target set.

        The result holds every info here plus every target info whose url
        this set does not cover.
        """
        extra = [i for i in target._infos if not self.contains_url(i.url)]
        return self.set_elements(self._infos + tuple(extra))

    def name_mapper(self, target: "PluginInfoSet") -> Callable[[PluginName], Optional[PluginName]]:
        """
        Return a function mapping a name here to the target name with the
        same url. Target names without a counterpart map to themselves and
        names found only here map to themselves.
        """
        mapping: Dict[PluginName, PluginName] = {}
        for info in target._infos:
            mapping[info.name] = info.name
        for info in self._infos:
            found = target.get_by_url(info.url)
            mapping[info.name] = found.name if found is not None else info.name
        return mapping.get

    def to_alias_set(self, helper=None):
        """An alias set listing every info name as a plain pass-through name."""
        from pluginalias.alias_set import PluginAliasSet

        return PluginAliasSet.from_infos(self, helper)

    # -------------------------------------------------------------------------
    # Collection Protocol
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[PluginInfo]:
        return iter(self._infos)

    def __len__(self) -> int:
        return len(self._infos)

    def __contains__(self, info: object) -> bool:
        return info in self._infos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluginInfoSet):
            return NotImplemented
        return self._infos == other._infos

    def __hash__(self) -> int:
        return hash(self._infos)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def text(self) -> str:
        return ", ".join(i.text() for i in self._infos)

    def to_json(self) -> str:
        return json.dumps([i.to_dict() for i in self._infos], sort_keys=True)

    @classmethod
    def from_json(
        cls,
        json_str: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginInfoSet":
        data = json.loads(json_str)
        if not isinstance(data, list):
            raise TypeError(f"Expected list, got {type(data).__name__}")
        return cls(PluginInfo.from_dict(d, case_sensitivity) for d in data)

    def tree_print(self, printer) -> None:
        for info in self._infos:
            info.tree_print(printer)

    def __repr__(self) -> str:
        return f"PluginInfoSet({self.text()!r})"

    def __str__(self) -> str:
        return self.text()


def _sort_key(info: PluginInfo):
    name = info.name
    return (name.case_sensitivity.key(name.value), info.url.text)
