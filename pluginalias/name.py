"""
name.py

PluginName: the identifier every capability, alias and selector is keyed by.

Design Invariants:
- Immutable after creation
- Equality, ordering and hashing follow a CaseSensitivity policy
- The name grammar is enforced by parse(), not by the constructor
"""

import json
from enum import Enum
from typing import Any

from pluginalias.errors import ImmutabilityError, InvalidNameError, NameLengthError

MAX_LENGTH = 255


class CaseSensitivity(Enum):
    """Policy deciding whether two names differing only in case are equal."""
    SENSITIVE = "sensitive"
    INSENSITIVE = "insensitive"

    def key(self, text: str) -> str:
        """Return the comparison key for text under this policy."""
        if self is CaseSensitivity.INSENSITIVE:
            return text.casefold()
        return text

    @classmethod
    def from_string(cls, value: str) -> "CaseSensitivity":
        """Convert 'sensitive' or 'insensitive' (any case) to a policy."""
        return cls(value.lower())


def is_initial_char(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


def is_part_char(c: str) -> bool:
    return is_initial_char(c) or ("0" <= c <= "9") or c == "-"


def is_name_char(pos: int, c: str) -> bool:
    """True if c may appear at pos within a name."""
    return is_initial_char(c) if pos == 0 else is_part_char(c)


class PluginName:
    """
    An immutable, case-configurable name.

    Two names compare case-insensitively only when both carry the
    INSENSITIVE policy; any other pairing compares the plain text.

    Equality is only transitive among names sharing one policy:
    PluginName("A", INSENSITIVE) == PluginName("a", INSENSITIVE) and
    PluginName("a", INSENSITIVE) == PluginName("a"), yet
    PluginName("A", INSENSITIVE) != PluginName("a"). Collections keyed by
    names should hold one policy; PluginAliasSet.merge matches provider
    names by its own policy instead.
    """

    __slots__ = ('_value', '_case_sensitivity', '_hash', '_frozen')

    def __init__(
        self,
        value: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ):
        if not isinstance(value, str):
            raise TypeError(f"name must be a string, got {type(value).__name__}")
        if not isinstance(case_sensitivity, CaseSensitivity):
            raise TypeError(
                f"case_sensitivity must be CaseSensitivity, got {type(case_sensitivity).__name__}"
            )

        object.__setattr__(self, '_value', value)
        object.__setattr__(self, '_case_sensitivity', case_sensitivity)
        # casefolded so equal names hash alike under either policy
        object.__setattr__(self, '_hash', hash(value.casefold()))
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginName", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginName", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    @classmethod
    def parse(
        cls,
        text: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginName":
        """
        Parse text into a name, enforcing the name grammar.

        Raises:
            NameLengthError: If text is empty or longer than MAX_LENGTH
            InvalidNameError: At the first character breaking the grammar
        """
        if not isinstance(text, str):
            raise TypeError(f"name must be a string, got {type(text).__name__}")

        length = len(text)
        if length == 0 or length > MAX_LENGTH:
            raise NameLengthError(length, MAX_LENGTH)

        for pos, c in enumerate(text):
            if not is_name_char(pos, c):
                raise InvalidNameError(text, pos)

        return cls(text, case_sensitivity)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def value(self) -> str:
        return self._value

    @property
    def case_sensitivity(self) -> CaseSensitivity:
        return self._case_sensitivity

    # -------------------------------------------------------------------------
    # Comparison Methods
    # -------------------------------------------------------------------------

    def _policy(self, other: "PluginName") -> CaseSensitivity:
        if (
            self._case_sensitivity is CaseSensitivity.INSENSITIVE
            and other._case_sensitivity is CaseSensitivity.INSENSITIVE
        ):
            return CaseSensitivity.INSENSITIVE
        return CaseSensitivity.SENSITIVE

    def _keys(self, other: "PluginName"):
        policy = self._policy(other)
        return policy.key(self._value), policy.key(other._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluginName):
            return NotImplemented
        left, right = self._keys(other)
        return left == right

    def __lt__(self, other: "PluginName") -> bool:
        if not isinstance(other, PluginName):
            return NotImplemented
        left, right = self._keys(other)
        return left < right

    def __le__(self, other: "PluginName") -> bool:
        if not isinstance(other, PluginName):
            return NotImplemented
        left, right = self._keys(other)
        return left <= right

    def __gt__(self, other: "PluginName") -> bool:
        if not isinstance(other, PluginName):
            return NotImplemented
        left, right = self._keys(other)
        return left > right

    def __ge__(self, other: "PluginName") -> bool:
        if not isinstance(other, PluginName):
            return NotImplemented
        left, right = self._keys(other)
        return left >= right

    def __hash__(self) -> int:
        return self._hash

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        """Names marshal to a plain JSON string."""
        return json.dumps(self._value)

    @classmethod
    def from_json(
        cls,
        json_str: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "PluginName":
        """Parse a name from its JSON string form."""
        return cls.parse(json.loads(json_str), case_sensitivity)

    # -------------------------------------------------------------------------
    # String Representations
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        if self._case_sensitivity is CaseSensitivity.INSENSITIVE:
            return f"PluginName({self._value!r}, INSENSITIVE)"
        return f"PluginName({self._value!r})"

    def __str__(self) -> str:
        return self._value
