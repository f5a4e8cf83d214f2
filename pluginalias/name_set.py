"""
name_set.py

PluginNameSet: an immutable sorted set of names, written as
comma separated text such as ``plugin111, plugin222``.
"""

import json
from typing import Any, Iterable, Iterator, Tuple

from pluginalias.errors import ImmutabilityError
from pluginalias.name import CaseSensitivity, PluginName
from pluginalias.parser import PluginExpressionParser


class PluginNameSet:
    """Immutable sorted set of PluginName values."""

    __slots__ = ('_names', '_lookup', '_frozen')

    def __init__(self, names: Iterable[PluginName] = ()):
        unique = []
        seen = set()
        for name in names:
            if not isinstance(name, PluginName):
                raise TypeError(f"Expected PluginName, got {type(name).__name__}")
            if name not in seen:
                seen.add(name)
                unique.append(name)

        object.__setattr__(self, '_names', tuple(sorted(unique, key=_sort_key)))
        object.__setattr__(self, '_lookup', frozenset(unique))
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginNameSet", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginNameSet", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    @classmethod
    def parse(
        cls,
        text: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginNameSet":
        """
        Parse comma separated names; blank text is the empty set.

        Raises:
            InvalidCharacterError: At the first character that is not part
                of a name, separator or whitespace
        """
        parser = PluginExpressionParser(text, case_sensitivity)
        names = []

        parser.spaces()
        if parser.is_empty():
            return cls()

        while True:
            name = parser.name()
            if name is None:
                raise parser.invalid_character()
            names.append(name)

            parser.spaces()
            if parser.is_empty():
                break
            if not parser.parameter_separator():
                raise parser.invalid_character()
            parser.spaces()

        return cls(names)

    @property
    def names(self) -> Tuple[PluginName, ...]:
        return self._names

    def contains(self, name: PluginName) -> bool:
        return name in self._lookup

    def concat(self, name: PluginName) -> "PluginNameSet":
        if self.contains(name):
            return self
        return PluginNameSet(self._names + (name,))

    def delete(self, name: PluginName) -> "PluginNameSet":
        if not self.contains(name):
            return self
        return PluginNameSet(n for n in self._names if n != name)

    def text(self) -> str:
        return ", ".join(n.value for n in self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._lookup

    def __iter__(self) -> Iterator[PluginName]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluginNameSet):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def to_json(self) -> str:
        """Name sets marshal to their text as a JSON string."""
        return json.dumps(self.text())

    @classmethod
    def from_json(
        cls,
        json_str: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginNameSet":
        return cls.parse(json.loads(json_str), case_sensitivity)

    def __repr__(self) -> str:
        return f"PluginNameSet({self.text()!r})"

    def __str__(self) -> str:
        return self.text()


def _sort_key(name: PluginName) -> str:
    return name.case_sensitivity.key(name.value)
