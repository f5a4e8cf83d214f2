"""
url.py

AbsoluteUrl: the canonical location published for every capability.

Only the small part of url handling this package needs: parsing an absolute
url (scheme and host required, no whitespace) and comparing by its text.
"""

from typing import Any, Optional
from urllib.parse import urlsplit

from pluginalias.errors import ImmutabilityError, InvalidUrlError


class AbsoluteUrl:
    """An immutable absolute url, ordered and compared by its text."""

    __slots__ = ('_text', '_scheme', '_host', '_frozen')

    def __init__(self, text: str):
        if not isinstance(text, str):
            raise TypeError(f"url must be a string, got {type(text).__name__}")
        if not text:
            raise InvalidUrlError(text, "empty")
        for c in text:
            if c.isspace():
                raise InvalidUrlError(text, "contains whitespace")

        try:
            parts = urlsplit(text)
        except ValueError as e:
            raise InvalidUrlError(text, str(e))

        if not parts.scheme:
            raise InvalidUrlError(text, "missing scheme")
        if not text[len(parts.scheme):].startswith("://"):
            raise InvalidUrlError(text, "missing '://'")
        if not parts.netloc:
            raise InvalidUrlError(text, "missing host")

        object.__setattr__(self, '_text', text)
        object.__setattr__(self, '_scheme', parts.scheme)
        object.__setattr__(self, '_host', parts.hostname or "")
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("AbsoluteUrl", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("AbsoluteUrl", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    @classmethod
    def parse(cls, text: str) -> "AbsoluteUrl":
        return cls(text)

    @classmethod
    def try_parse(cls, text: str) -> Optional["AbsoluteUrl"]:
        """Return the url, or None when text is not an absolute url."""
        try:
            return cls(text)
        except InvalidUrlError:
            return None

    @property
    def text(self) -> str:
        return self._text

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def host(self) -> str:
        return self._host

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbsoluteUrl):
            return NotImplemented
        return self._text == other._text

    def __lt__(self, other: "AbsoluteUrl") -> bool:
        if not isinstance(other, AbsoluteUrl):
            return NotImplemented
        return self._text < other._text

    def __le__(self, other: "AbsoluteUrl") -> bool:
        if not isinstance(other, AbsoluteUrl):
            return NotImplemented
        return self._text <= other._text

    def __gt__(self, other: "AbsoluteUrl") -> bool:
        if not isinstance(other, AbsoluteUrl):
            return NotImplemented
        return self._text > other._text

    def __ge__(self, other: "AbsoluteUrl") -> bool:
        if not isinstance(other, AbsoluteUrl):
            return NotImplemented
        return self._text >= other._text

    def __hash__(self) -> int:
        return hash(self._text)

    def __repr__(self) -> str:
        return f"AbsoluteUrl({self._text!r})"

    def __str__(self) -> str:
        return self._text
