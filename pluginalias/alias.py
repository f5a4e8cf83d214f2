"""
alias.py

PluginAlias: one entry of an alias list: a name, optionally redirected to
a selector, optionally introducing its own url.

Design Invariants:
- Immutable after creation
- A url requires a selector
- Ordering: name, then selector (absent first), then url (absent first)
"""

from typing import Any, Optional

from pluginalias.errors import ImmutabilityError, MissingSelectorError
from pluginalias.name import PluginName
from pluginalias.selector import Selector
from pluginalias.url import AbsoluteUrl


class PluginAlias:
    """
    A single alias declaration.

    Without a selector the alias is a plain pass-through name. With a
    selector it renames the selector's target, and with a url it also
    introduces a new capability published at that url.
    """

    __slots__ = ('_name', '_selector', '_url', '_frozen')

    def __init__(
        self,
        name: PluginName,
        selector: Optional[Selector] = None,
        url: Optional[AbsoluteUrl] = None,
    ):
        if not isinstance(name, PluginName):
            raise TypeError(f"name must be PluginName, got {type(name).__name__}")
        if selector is not None and not isinstance(selector, Selector):
            raise TypeError(f"selector must be Selector, got {type(selector).__name__}")
        if url is not None and not isinstance(url, AbsoluteUrl):
            raise TypeError(f"url must be AbsoluteUrl, got {type(url).__name__}")
        if selector is None and url is not None:
            raise MissingSelectorError(name.value, url.text)

        object.__setattr__(self, '_name', name)
        object.__setattr__(self, '_selector', selector)
        object.__setattr__(self, '_url', url)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginAlias", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("PluginAlias", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> PluginName:
        return self._name

    @property
    def selector(self) -> Optional[Selector]:
        return self._selector

    @property
    def url(self) -> Optional[AbsoluteUrl]:
        return self._url

    @property
    def is_alias(self) -> bool:
        """True when this entry redirects to a selector."""
        return self._selector is not None

    @property
    def target(self) -> PluginName:
        """The provider name this entry depends on."""
        return self._selector.name if self._selector is not None else self._name

    # -------------------------------------------------------------------------
    # Comparison Methods
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluginAlias):
            return NotImplemented
        return (
            self._name == other._name
            and self._selector == other._selector
            and self._url == other._url
        )

    def __lt__(self, other: "PluginAlias") -> bool:
        if not isinstance(other, PluginAlias):
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other: "PluginAlias") -> bool:
        if not isinstance(other, PluginAlias):
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other: "PluginAlias") -> bool:
        if not isinstance(other, PluginAlias):
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other: "PluginAlias") -> bool:
        if not isinstance(other, PluginAlias):
            return NotImplemented
        return self._compare(other) >= 0

    def _compare(self, other: "PluginAlias") -> int:
        for mine, theirs in (
            (self._name, other._name),
            (self._selector, other._selector),
            (self._url, other._url),
        ):
            if mine == theirs:
                continue
            # absent sorts before present
            if mine is None:
                return -1
            if theirs is None:
                return 1
            return -1 if mine < theirs else 1
        return 0

    def __hash__(self) -> int:
        return hash((self._name, self._selector, self._url))

    # -------------------------------------------------------------------------
    # String Representations
    # -------------------------------------------------------------------------

    def text(self) -> str:
        """``name``, ``name selector`` or ``name selector url``."""
        parts = [self._name.value]
        if self._selector is not None:
            parts.append(self._selector.text())
        if self._url is not None:
            parts.append(self._url.text)
        return " ".join(parts)

    def text_and_space(self) -> str:
        """text() followed by a space when it ends with a url."""
        text = self.text()
        if self._url is not None:
            text += " "
        return text

    def tree_print(self, printer) -> None:
        printer.println(self._name.value)
        if self._selector is not None:
            printer.indent()
            self._selector.tree_print(printer)
            if self._url is not None:
                printer.println(self._url.text)
            printer.outdent()

    def __repr__(self) -> str:
        return f"PluginAlias({self.text()!r})"

    def __str__(self) -> str:
        return self.text()
