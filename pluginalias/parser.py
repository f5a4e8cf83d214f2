"""
parser.py

Cursor based scanner shared by every text form in this package: alias
lists, info sets, name sets and selector parameter lists.

Design Invariants:
- A single left-to-right pass, the cursor only moves backwards to give up
  the spaces after a selector name when no parameter list follows
- Every try-method either consumes its token or leaves the cursor alone
- Errors report the offending character and its position, or the open
  quote or paren that is never closed
"""

import re
from typing import Any, Callable, List, Optional

from pluginalias.errors import (
    InvalidCharacterError,
    UnterminatedError,
)
from pluginalias.name import MAX_LENGTH, CaseSensitivity, PluginName
from pluginalias.url import AbsoluteUrl


PARAMETER_BEGIN = "("
PARAMETER_END = ")"
PARAMETER_SEPARATOR = ","
ENVIRONMENT_VALUE_PREFIX = "$"
DOUBLE_QUOTE = '"'

NAME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9-]*")
NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
NON_SPACE_PATTERN = re.compile(r"\S+")
SPACE_PATTERN = re.compile(r"\s+")

ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
}

# (name, parameter_text) -> value, used for selectors nested in a parameter list
SelectorFactory = Callable[[PluginName, str], Any]


class PluginExpressionParser:
    """Scans tokens from a piece of plugin expression text."""

    def __init__(
        self,
        text: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ):
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")
        self.text = text
        self.pos = 0
        self.case_sensitivity = case_sensitivity

    # === Cursor ===

    def is_empty(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return "" if self.is_empty() else self.text[self.pos]

    def text_between(self, start: int) -> str:
        return self.text[start:self.pos]

    def invalid_character(self, reason: str = "") -> InvalidCharacterError:
        """
        Build an error for the character under the cursor.

        At the end of the text the last character is reported instead, so a
        dangling comma or open paren is named precisely.
        """
        pos = self.pos
        if pos >= len(self.text):
            pos = len(self.text) - 1
        return InvalidCharacterError(self.text, max(pos, 0), reason)

    # === Tokens ===

    def spaces(self) -> bool:
        """Skip any whitespace, returning True if some was skipped."""
        match = SPACE_PATTERN.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            return True
        return False

    def _char(self, c: str) -> bool:
        if self.text.startswith(c, self.pos):
            self.pos += len(c)
            return True
        return False

    def parameters_begin(self) -> bool:
        return self._char(PARAMETER_BEGIN)

    def parameters_end(self) -> bool:
        return self._char(PARAMETER_END)

    def parameter_separator(self) -> bool:
        return self._char(PARAMETER_SEPARATOR)

    def name(self) -> Optional[PluginName]:
        """Try to consume a name, returning None if none starts here."""
        match = NAME_PATTERN.match(self.text, self.pos)
        if not match:
            return None
        if match.end() - match.start() > MAX_LENGTH:
            # reports the first character past the limit
            self.pos = match.start() + MAX_LENGTH
            raise self.invalid_character()
        self.pos = match.end()
        return PluginName(match.group(), self.case_sensitivity)

    def number(self) -> Optional[Any]:
        """Try to consume a number literal, as an int when it has no fraction."""
        match = NUMBER_PATTERN.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        token = match.group()
        if "." in token or "e" in token or "E" in token:
            return float(token)
        return int(token)

    def double_quoted_string(self) -> Optional[str]:
        """
        Try to consume a double quoted string, decoding backslash escapes.

        Raises:
            UnterminatedError: If the closing quote is missing
        """
        if self.peek() != DOUBLE_QUOTE:
            return None

        start = self.pos
        text = self.text
        i = start + 1
        chars = []
        while i < len(text):
            c = text[i]
            if c == DOUBLE_QUOTE:
                self.pos = i + 1
                return "".join(chars)
            if c == "\\":
                i += 1
                if i >= len(text):
                    break
                chars.append(ESCAPES.get(text[i], text[i]))
            else:
                chars.append(c)
            i += 1

        raise UnterminatedError(DOUBLE_QUOTE, text, start)

    def environment_value_name(self) -> Optional[str]:
        """Try to consume ``$Name`` returning the name without the dollar sign."""
        if self.peek() != ENVIRONMENT_VALUE_PREFIX:
            return None
        match = NAME_PATTERN.match(self.text, self.pos + 1)
        if not match:
            return None
        self.pos = match.end()
        return match.group()

    def url(self) -> Optional[AbsoluteUrl]:
        """Try to consume an absolute url; anything else leaves the cursor alone."""
        match = NON_SPACE_PATTERN.match(self.text, self.pos)
        if not match:
            return None
        url = AbsoluteUrl.try_parse(match.group())
        if url is not None:
            self.pos = match.end()
        return url

    # === Parameter lists ===

    def parameter_values(
        self,
        environment_value: Callable[[str], Any],
        selector_factory: SelectorFactory,
    ) -> Optional[List[Any]]:
        """
        Try to consume a parenthesized parameter list.

        Values are environment references, quoted strings, numbers or nested
        selectors, separated by commas with optional surrounding spaces.
        Returns None when the cursor is not at an open paren.

        Raises:
            UnterminatedError: At the open paren, if the text ends before
                the matching close paren
        """
        open_pos = self.pos
        if not self.parameters_begin():
            return None

        values: List[Any] = []
        require_separator = False
        while True:
            self.spaces()
            if self.parameters_end():
                break
            if self.is_empty():
                raise UnterminatedError(PARAMETER_END, self.text, open_pos)

            if require_separator:
                if not self.parameter_separator():
                    raise self.invalid_character()
                self.spaces()
                if self.is_empty():
                    raise UnterminatedError(PARAMETER_END, self.text, open_pos)

            values.append(self._value(environment_value, selector_factory))
            require_separator = True

        return values

    def _value(
        self,
        environment_value: Callable[[str], Any],
        selector_factory: SelectorFactory,
    ) -> Any:
        name = self.environment_value_name()
        if name is not None:
            return environment_value(name)

        string = self.double_quoted_string()
        if string is not None:
            return string

        number = self.number()
        if number is not None:
            return number

        selector_name = self.name()
        if selector_name is not None:
            start = self.pos
            self.spaces()
            if self.parameter_values(environment_value, selector_factory) is None:
                self.pos = start
            return selector_factory(selector_name, self.text_between(start))

        raise self.invalid_character()

    def skip_parameters(self) -> bool:
        """Consume a parameter list without evaluating it."""
        return self.parameter_values(_ignore, _ignore) is not None

    def selector_parameter_text(self) -> str:
        """
        Consume the parameter list following a selector name, returning its
        text including any spaces before the open paren.

        Without a parameter list the spaces are left unread and "" is
        returned.
        """
        start = self.pos
        self.spaces()
        if not self.skip_parameters():
            self.pos = start
            return ""
        return self.text_between(start)

    def __repr__(self) -> str:
        return f"PluginExpressionParser({self.text[self.pos:]!r})"


def _ignore(*args: Any) -> None:
    return None
