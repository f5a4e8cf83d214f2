"""
test_errors.py

Tests for the plugin naming error system.

Validates:
- Messages carry the exact offending value
- Parse errors point at the offending character
- Error codes group errors by kind
- Internal details are never exposed to operators
"""

import pytest

from pluginalias.errors import (
    PluginError,
    ErrorLocation,
    ImmutabilityError,
    create_location,
    format_error_for_user,
    # Parse errors
    ParseError,
    InvalidCharacterError,
    UnterminatedError,
    InvalidNameError,
    NameLengthError,
    InvalidUrlError,
    # Validation errors
    PluginValidationError,
    DuplicateNameError,
    DuplicateUrlError,
    DuplicateAliasError,
    DuplicateAliasTargetError,
    MissingSelectorError,
    EmptyProvidersError,
    InvalidLabelError,
    # Resolution errors
    ResolutionError,
    UnknownNameError,
    AmbiguousNameError,
    AliasParametersError,
    UnknownEnvironmentValueError,
)


class TestErrorLocation:
    """Test ErrorLocation formatting."""

    def test_position_only(self):
        """Single line text reports the position."""
        loc = ErrorLocation(position=3)
        assert loc.format() == "position 3"

    def test_line_and_column(self):
        """Multi line text reports line and column."""
        loc = ErrorLocation(position=10, line=2, column=4)
        assert loc.format() == "line 2, column 4"

    def test_create_location_second_line(self):
        """create_location finds the line holding the position."""
        loc = create_location("abc\ndef", 5)
        assert loc.line == 2
        assert loc.column == 1
        assert loc.source_line == "def"

    def test_create_location_first_line(self):
        """Positions on the first line keep their column."""
        loc = create_location("plugin111, [", 11)
        assert loc.line == 1
        assert loc.column == 11
        assert loc.source_line == "plugin111, ["


class TestPluginErrorBase:
    """Test the PluginError base class."""

    def test_str_includes_code(self):
        """str() is the short format with the error code."""
        err = PluginError("Something went wrong", error_code="P999")
        assert str(err) == "[P999] Something went wrong"
        assert err.message == "Something went wrong"

    def test_full_format_includes_explanation(self):
        """Full format shows explanation and suggestions."""
        err = PluginError(
            "Bad alias",
            explanation="Aliases must be unique.",
            suggestions=["Rename one", "Delete one"],
        )
        full = err.format_full()
        assert "Bad alias" in full
        assert "Aliases must be unique." in full
        assert "Suggestions:" in full
        assert "- Rename one" in full

    def test_single_suggestion(self):
        """A single suggestion is printed inline."""
        err = PluginError("Bad", suggestions=["Fix it"])
        assert "Suggestion: Fix it" in err.format_full()


class TestParseErrors:
    """Test parse error messages and positions."""

    def test_invalid_character_message(self):
        """Invalid character names the character and its position."""
        err = InvalidCharacterError("ab!c", 2)
        assert err.message == "Invalid character '!' at 2"
        assert err.character == "!"
        assert err.position == 2
        assert err.error_code == "P101"

    def test_invalid_character_reason(self):
        """A reason is appended to the message."""
        err = InvalidCharacterError("https://example.com", 18, "missing name")
        assert err.message == "Invalid character 'm' at 18 missing name"

    def test_invalid_character_caret(self):
        """The full format points a caret under the character."""
        err = InvalidCharacterError("ab!c", 2)
        lines = err.format_full().split("\n")
        source = lines.index("    ab!c")
        assert lines[source + 1] == " " * 6 + "^"

    def test_unterminated_message(self):
        """Unterminated strings name the missing terminator."""
        err = UnterminatedError('"', 'plugin("Hello', 7)
        assert err.message == "Missing terminating '\"'"
        assert err.location.position == 7

    def test_invalid_name_is_invalid_character(self):
        """Name grammar errors are invalid character errors."""
        err = InvalidNameError("1abc", 0)
        assert isinstance(err, InvalidCharacterError)
        assert err.message == "Invalid character '1' at 0 in PluginName '1abc'"
        assert err.error_code == "P103"

    def test_name_length(self):
        """Empty and over-long names have their own messages."""
        assert NameLengthError(0, 255).message == "Name must not be empty"
        assert NameLengthError(300, 255).message == "Name length 300 > 255"

    def test_invalid_url(self):
        """Invalid urls name the text and the reason."""
        err = InvalidUrlError("example.com", "missing scheme")
        assert err.message == "Invalid absolute url 'example.com': missing scheme"

    def test_parse_errors_share_base(self):
        """Every parse error derives from ParseError."""
        for err in [
            InvalidCharacterError("a", 0),
            UnterminatedError(")"),
            InvalidNameError("1", 0),
            NameLengthError(0, 255),
            InvalidUrlError("x", "y"),
        ]:
            assert isinstance(err, ParseError)
            assert isinstance(err, PluginError)


class TestValidationErrors:
    """Test invariant violation messages."""

    def test_duplicate_name(self):
        """Info set name collisions quote the name."""
        assert DuplicateNameError("plugin111").message == 'Duplicate name "plugin111"'

    def test_duplicate_url(self):
        """Url collisions quote the url."""
        err = DuplicateUrlError("https://example.com/111")
        assert err.message == 'Duplicate url "https://example.com/111"'

    def test_duplicate_alias(self):
        """Alias or name collisions name the value."""
        err = DuplicateAliasError("alias111")
        assert err.message == "Duplicate name/alias: alias111"

    def test_duplicate_alias_target(self):
        """Two aliases claiming one target name both aliases."""
        err = DuplicateAliasTargetError("alias111", "alias222")
        assert err.message == "Duplicate alias: alias111 and alias222"

    def test_missing_selector(self):
        """A url without a selector names both."""
        err = MissingSelectorError("alias111", "https://example.com/111")
        assert err.message == "alias111 missing selector when url=https://example.com/111"

    def test_empty_providers(self):
        """Empty provider collections name the label."""
        assert EmptyProvidersError("Converter").message == "Empty Converter providers"

    def test_validation_errors_share_base(self):
        """Every validation error derives from PluginValidationError."""
        for err in [
            DuplicateNameError("a"),
            DuplicateUrlError("b"),
            DuplicateAliasError("c"),
            DuplicateAliasTargetError("d", "e"),
            MissingSelectorError("f", "g"),
            EmptyProvidersError("h"),
            InvalidLabelError(""),
        ]:
            assert isinstance(err, PluginValidationError)


class TestResolutionErrors:
    """Test unknown and ambiguous reference messages."""

    def test_unknown_name(self):
        """Unknown names include the label."""
        assert UnknownNameError("Converter", "abc").message == "Unknown Converter abc"

    def test_ambiguous_name(self):
        """Ambiguous names include the provider count."""
        err = AmbiguousNameError("Plugin", "service-1", 2)
        assert err.message == "Ambiguous Plugin service-1 published by 2 providers"

    def test_alias_parameters(self):
        """Parameter clashes name the alias."""
        err = AliasParametersError("alias111")
        assert err.message == "Alias alias111 should not have any parameters"

    def test_unknown_environment_value(self):
        """Missing environment values name the variable."""
        err = UnknownEnvironmentValueError("Locale")
        assert err.message == "Missing environment value Locale"

    def test_resolution_errors_share_base(self):
        """Every resolution error derives from ResolutionError."""
        for err in [
            UnknownNameError("a", "b"),
            AmbiguousNameError("a", "b", 2),
            AliasParametersError("c"),
            UnknownEnvironmentValueError("d"),
        ]:
            assert isinstance(err, ResolutionError)


class TestUserFormatting:
    """Test operator facing formatting."""

    def test_plugin_error_full_format(self):
        """Plugin errors get their full format."""
        err = DuplicateAliasError("alias111")
        assert "Duplicate name/alias: alias111" in format_error_for_user(err)

    def test_other_errors_are_hidden(self):
        """Unexpected errors never leak their details."""
        formatted = format_error_for_user(ValueError("internal secret"))
        assert "internal secret" not in formatted
        assert "P000" in formatted

    def test_immutability_error_message(self):
        """Immutability errors name the type and operation."""
        err = ImmutabilityError("PluginName", "set attribute '_value'")
        assert str(err) == "Cannot set attribute '_value': PluginName is immutable after creation"
