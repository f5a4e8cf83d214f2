"""
selector.py

Selector: a name plus the raw parameter text following it, for example
``text-format("dd/mm/yyyy", $Locale, 2)``.

Design Invariants:
- Immutable after creation; setters return a new value, or the same
  value when nothing changes
- The parameter text is stored and round-tripped verbatim, it is only
  evaluated on request
- text() is name + parameter text with no separator
"""

import json
from numbers import Number
from typing import Any, List, Optional

from pluginalias.errors import (
    ImmutabilityError,
    NameLengthError,
    UnknownEnvironmentValueError,
)
from pluginalias.name import CaseSensitivity, PluginName
from pluginalias.parser import PluginExpressionParser


ESCAPED = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def quote_and_escape(text: str) -> str:
    """Double quote text, backslash escaping quotes and control characters."""
    return '"' + "".join(ESCAPED.get(c, c) for c in text) + '"'


def render_value(value: Any) -> str:
    """Render one parameter value in the parameter-list grammar."""
    if isinstance(value, Selector):
        return value.text()
    if isinstance(value, str):
        return quote_and_escape(value)
    if isinstance(value, bool) or not isinstance(value, Number):
        raise TypeError(
            f"Unsupported parameter value {value!r} ({type(value).__name__})"
        )
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Selector:
    """
    An immutable name with optional parameter text.

    Selectors order by name, then by parameter text.
    """

    __slots__ = ('_name', '_parameter_text', '_frozen')

    def __init__(self, name: PluginName, parameter_text: str = ""):
        if not isinstance(name, PluginName):
            raise TypeError(f"name must be PluginName, got {type(name).__name__}")
        if not isinstance(parameter_text, str):
            raise TypeError(
                f"parameter_text must be a string, got {type(parameter_text).__name__}"
            )

        object.__setattr__(self, '_name', name)
        object.__setattr__(self, '_parameter_text', parameter_text)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("Selector", f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ImmutabilityError("Selector", f"delete attribute '{name}'")
        object.__delattr__(self, name)

    @classmethod
    def parse(
        cls,
        text: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "Selector":
        """
        Parse ``name`` or ``name(parameters...)``.

        Spaces may separate the name from its parameter list, which must
        reach the end of the text. They are kept in the parameter text.

        Raises:
            NameLengthError: If text is empty
            InvalidCharacterError: At the first character that does not fit
            UnterminatedError: If a quoted string or the parameter list is
                never closed
        """
        if not text:
            raise NameLengthError(0, 0)

        parser = PluginExpressionParser(text, case_sensitivity)
        name = parser.name()
        if name is None:
            raise parser.invalid_character()

        parameter_text = parser.selector_parameter_text()
        if not parser.is_empty():
            raise parser.invalid_character()

        return cls(name, parameter_text)

    @classmethod
    def with_name(cls, name: PluginName) -> "Selector":
        return cls(name, "")

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> PluginName:
        return self._name

    @property
    def parameter_text(self) -> str:
        return self._parameter_text

    def text(self) -> str:
        return self._name.value + self._parameter_text

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_name(self, name: PluginName) -> "Selector":
        if name == self._name and name.value == self._name.value:
            return self
        return Selector(name, self._parameter_text)

    def set_parameter_text(self, parameter_text: str) -> "Selector":
        if parameter_text == self._parameter_text:
            return self
        return Selector(self._name, parameter_text)

    def set_values(self, values: List[Any]) -> "Selector":
        """
        Replace the parameter text with the rendered values.

        Strings are quoted, integral numbers lose their fraction and nested
        selectors render as their text. An empty list clears the parameters.
        """
        if not values:
            return self.set_parameter_text("")
        rendered = ", ".join(render_value(v) for v in values)
        return self.set_parameter_text(f"({rendered})")

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def evaluate_value_text(self, context: Optional[Any] = None) -> List[Any]:
        """
        Evaluate the parameter text into Python values.

        Numbers become int or float, quoted strings are unescaped, ``$Name``
        is looked up through ``context.environment_value`` and nested
        selectors become Selector values.

        Raises:
            UnknownEnvironmentValueError: For a $Name with no value
            InvalidCharacterError: If the parameter text is malformed
        """
        if not self._parameter_text:
            return []

        def environment_value(name: str) -> Any:
            if context is None:
                raise UnknownEnvironmentValueError(name)
            return context.environment_value(name)

        case_sensitivity = self._name.case_sensitivity

        def selector_factory(name: PluginName, parameter_text: str) -> "Selector":
            return Selector(name, parameter_text)

        parser = PluginExpressionParser(self._parameter_text, case_sensitivity)
        parser.spaces()
        values = parser.parameter_values(environment_value, selector_factory)
        if values is None or not parser.is_empty():
            raise parser.invalid_character()
        return values

    # -------------------------------------------------------------------------
    # Comparison Methods
    # -------------------------------------------------------------------------

    def _key(self):
        return (self._name, self._parameter_text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Selector") -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: "Selector") -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: "Selector") -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: "Selector") -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        """Selectors marshal to their text as a JSON string."""
        return json.dumps(self.text())

    @classmethod
    def from_json(
        cls,
        json_str: str,
        case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
    ) -> "Selector":
        return cls.parse(json.loads(json_str), case_sensitivity)

    # -------------------------------------------------------------------------
    # String Representations
    # -------------------------------------------------------------------------

    def tree_print(self, printer) -> None:
        printer.println(self._name.value)
        if self._parameter_text:
            printer.indent()
            printer.println(quote_and_escape(self._parameter_text))
            printer.outdent()

    def __repr__(self) -> str:
        return f"Selector({self.text()!r})"

    def __str__(self) -> str:
        return self.text()


def name_only_key(selector: Selector) -> PluginName:
    """Sort key comparing selectors by name alone, ignoring parameters."""
    return selector.name
