"""
errors.py

Human-friendly error system for plugin naming metadata.

Design principles:
- Every failure is raised, never downgraded to a warning
- Parse errors always carry the offending character and its position
- Validation errors name the offending value precisely
- ``message`` holds the plain text; ``str()`` adds the error code
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ErrorLocation:
    """Source location for an error inside DSL text."""
    position: int
    line: int = 1
    column: int = 0
    source_line: str = ""

    def format(self) -> str:
        """Format location as 'position N' or 'line N, column M'."""
        if self.line > 1:
            return f"line {self.line}, column {self.column}"
        return f"position {self.position}"


class PluginError(Exception):
    """
    Base class for all plugin naming errors.

    Errors are configuration/validation failures: they are synchronous and
    unrecoverable at the point raised.
    """

    def __init__(
        self,
        message: str,
        location: Optional[ErrorLocation] = None,
        *,
        explanation: str = "",
        suggestions: Optional[List[str]] = None,
        error_code: str = "P000",
    ):
        self.message = message
        self.location = location
        self.explanation = explanation
        self.suggestions = suggestions or []
        self.error_code = error_code
        super().__init__(self.format_short())

    def format_short(self) -> str:
        """Format as single-line error message."""
        return f"[{self.error_code}] {self.message}"

    def format_full(self) -> str:
        """Format as multi-line human-readable error."""
        lines = []

        header = f"Error {self.error_code}"
        if self.location:
            header += f" at {self.location.format()}"
        lines.append(header)
        lines.append("")

        lines.append(f"  {self.message}")

        if self.location and self.location.source_line:
            lines.append("")
            lines.append(f"    {self.location.source_line}")
            lines.append(" " * (4 + self.location.column) + "^")

        if self.explanation:
            lines.append("")
            lines.append(f"  {self.explanation}")

        if self.suggestions:
            lines.append("")
            if len(self.suggestions) == 1:
                lines.append(f"  Suggestion: {self.suggestions[0]}")
            else:
                lines.append("  Suggestions:")
                for suggestion in self.suggestions:
                    lines.append(f"    - {suggestion}")

        return "\n".join(lines)


class ImmutabilityError(Exception):
    """Raised when attempting to mutate an immutable value."""

    def __init__(self, type_name: str, operation: str):
        self.type_name = type_name
        self.operation = operation
        super().__init__(
            f"Cannot {operation}: {type_name} is immutable after creation"
        )


# === Parse Errors (P1xx) ===

class ParseError(PluginError):
    """Base class for malformed input."""
    pass


class InvalidCharacterError(ParseError):
    """Raised when a character cannot start or continue the expected token."""

    def __init__(
        self,
        text: str,
        position: int,
        reason: str = "",
        *,
        suggestions: Optional[List[str]] = None,
        error_code: str = "P101",
    ):
        self.text = text
        self.position = position
        self.character = text[position] if 0 <= position < len(text) else ""

        message = f"Invalid character {self.character!r} at {position}"
        if reason:
            message += f" {reason}"

        super().__init__(
            message=message,
            location=create_location(text, position),
            suggestions=suggestions,
            error_code=error_code,
        )


class UnterminatedError(ParseError):
    """Raised when a quoted string or parameter list is never closed."""

    def __init__(self, terminator: str, text: str = "", position: int = 0):
        self.terminator = terminator
        self.position = position
        super().__init__(
            message=f"Missing terminating {terminator!r}",
            location=create_location(text, position) if text else None,
            explanation="Quoted strings and parameter lists must be closed.",
            suggestions=[f"Add a closing {terminator} after the last value"],
            error_code="P102",
        )


class InvalidNameError(InvalidCharacterError):
    """Raised when text does not follow the name grammar."""

    def __init__(self, text: str, position: int, type_name: str = "PluginName"):
        self.type_name = type_name
        super().__init__(
            text,
            position,
            f"in {type_name} {text!r}",
            suggestions=["Names start with a letter followed by letters, digits or '-'"],
            error_code="P103",
        )


class NameLengthError(ParseError):
    """Raised when a name is empty or too long."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        if length == 0:
            message = "Name must not be empty"
        else:
            message = f"Name length {length} > {max_length}"
        super().__init__(message=message, error_code="P104")


class InvalidUrlError(ParseError):
    """Raised when text is not an absolute URL."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(
            message=f"Invalid absolute url {text!r}: {reason}",
            suggestions=["Use a full url such as https://example.com/plugin"],
            error_code="P105",
        )


# === Validation Errors (P2xx) ===

class PluginValidationError(PluginError):
    """Base class for invariant violations found at construction."""
    pass


class DuplicateNameError(PluginValidationError):
    """Raised when an info set holds two infos with the same name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(message=f'Duplicate name "{name}"', error_code="P201")


class DuplicateUrlError(PluginValidationError):
    """Raised when two infos or aliases declare the same url."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(message=f'Duplicate url "{url}"', error_code="P202")


class DuplicateAliasError(PluginValidationError):
    """Raised when an alias or plain name is declared twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message=f"Duplicate name/alias: {name}",
            explanation="Every alias and plain name may appear only once.",
            error_code="P203",
        )


class DuplicateAliasTargetError(PluginValidationError):
    """Raised when two aliases without their own url claim the same target."""

    def __init__(self, first: str, second: str):
        self.first = first
        self.second = second
        super().__init__(
            message=f"Duplicate alias: {first} and {second}",
            explanation="Both aliases would rename the same provider entry.",
            suggestions=["Give one of the aliases its own url"],
            error_code="P204",
        )


class MissingSelectorError(PluginValidationError):
    """Raised when an alias declares a url but no selector."""

    def __init__(self, name: str, url: str):
        self.name = name
        self.url = url
        super().__init__(
            message=f"{name} missing selector when url={url}",
            error_code="P205",
        )


class EmptyProvidersError(PluginValidationError):
    """Raised when a provider collection is built without providers."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(message=f"Empty {label} providers", error_code="P206")


class InvalidLabelError(PluginValidationError):
    """Raised when a label is missing or blank."""

    def __init__(self, label: object):
        self.label = label
        super().__init__(
            message=f"Label must be a non-empty string, got {label!r}",
            error_code="P207",
        )


# === Resolution Errors (P3xx) ===

class ResolutionError(PluginError):
    """Base class for lookups that cannot be satisfied."""
    pass


class UnknownNameError(ResolutionError):
    """Raised when a name or selector is not found."""

    def __init__(self, label: str, name: str):
        self.label = label
        self.name = name
        super().__init__(message=f"Unknown {label} {name}", error_code="P301")


class AmbiguousNameError(ResolutionError):
    """Raised when more than one provider publishes the same name."""

    def __init__(self, label: str, name: str, count: int):
        self.label = label
        self.name = name
        self.count = count
        super().__init__(
            message=f"Ambiguous {label} {name} published by {count} providers",
            suggestions=["Rename or filter one of the providers"],
            error_code="P302",
        )


class AliasParametersError(ResolutionError):
    """Raised when both an alias and its caller supply parameters."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(
            message=f"Alias {alias} should not have any parameters",
            error_code="P303",
        )


class UnknownEnvironmentValueError(ResolutionError):
    """Raised when a $name reference has no environment value."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message=f"Missing environment value {name}",
            error_code="P304",
        )


# === Utility Functions ===

def format_error_for_user(error: BaseException) -> str:
    """
    Format any exception for operator display.

    PluginError instances get the full format, anything else a generic
    message without internal details.
    """
    if isinstance(error, PluginError):
        return error.format_full()

    return (
        "Error P000\n"
        "\n"
        "  An unexpected error occurred.\n"
        "\n"
        "  If this persists, please report it as a bug."
    )


def create_location(text: str, position: int) -> ErrorLocation:
    """Create an ErrorLocation for a 0-based position, extracting its line."""
    line_start = text.rfind("\n", 0, max(position, 0)) + 1
    line_end = text.find("\n", line_start)
    if line_end == -1:
        line_end = len(text)
    return ErrorLocation(
        position=position,
        line=text.count("\n", 0, max(position, 0)) + 1,
        column=position - line_start,
        source_line=text[line_start:line_end],
    )
