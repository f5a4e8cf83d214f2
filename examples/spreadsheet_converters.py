"""
spreadsheet_converters.py

Spreadsheet cell converters published through plugin naming metadata.
A builtin provider publishes number, percent and date converters; a user's
alias list renames and parameterizes them.

Use case: let a sheet author write ``money`` instead of
``number-to-text(2)`` and still know which builtin does the work.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional

from pluginalias import (
    BasicProvider,
    PluginAliasSet,
    PluginHelper,
    PluginInfoSet,
    ProviderCollection,
    ProviderContext,
)

HELPER = PluginHelper("Converter")

BUILTIN_INFOS = (
    "https://example.com/converter/number-to-text number-to-text, "
    "https://example.com/converter/percent-to-text percent-to-text, "
    "https://example.com/converter/date-to-text date-to-text"
)

DATE_PATTERNS = {
    "en-AU": "%d/%m/%Y",
    "en-GB": "%d/%m/%Y",
    "en-US": "%m/%d/%Y",
}
ISO_DATE_PATTERN = "%Y-%m-%d"


@dataclass(frozen=True)
class NumberToText:
    """Fixed point number formatting."""
    decimals: int = 0

    def convert(self, value: float) -> str:
        return f"{value:.{self.decimals}f}"


@dataclass(frozen=True)
class PercentToText:
    """A fraction shown as a percentage."""
    decimals: int = 0

    def convert(self, value: float) -> str:
        return f"{value * 100:.{self.decimals}f}%"


@dataclass(frozen=True)
class DateToText:
    """Dates in the order a locale expects; unknown locales get ISO dates."""
    locale: str

    def convert(self, value: date) -> str:
        return value.strftime(DATE_PATTERNS.get(self.locale, ISO_DATE_PATTERN))


def _decimals(label: str, values: List[Any]) -> int:
    if len(values) > 1:
        raise ValueError(f"{label} expects at most 1 value, got {len(values)}")
    if not values:
        return 0
    decimals = values[0]
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError(f"{label} decimals must be a non-negative int, got {decimals!r}")
    return decimals


def _date_to_text(values: List[Any], context: ProviderContext) -> DateToText:
    if len(values) != 1 or not isinstance(values[0], str):
        raise ValueError(f"date-to-text expects one locale string, got {values!r}")
    return DateToText(values[0])


def builtin_provider() -> BasicProvider:
    """The converters every sheet can use."""
    return BasicProvider(
        HELPER.parse_info_set(BUILTIN_INFOS),
        {
            "number-to-text": lambda values, context: NumberToText(
                _decimals("number-to-text", values)
            ),
            "percent-to-text": lambda values, context: PercentToText(
                _decimals("percent-to-text", values)
            ),
            "date-to-text": _date_to_text,
        },
        HELPER,
    )


class SheetConverters:
    """
    The converters one sheet sees.

    Names written in cells resolve through the sheet's alias list first,
    then through the providers.
    """

    def __init__(self, alias_text: str, locale: Optional[str] = None):
        self.aliases: PluginAliasSet = HELPER.parse_alias_set(alias_text)
        self.providers = ProviderCollection([builtin_provider()], HELPER.label)

        environment = {}
        if locale is not None:
            environment["Locale"] = locale
        self.context = ProviderContext(environment)

    def visible(self) -> PluginInfoSet:
        """The converters this sheet's aliases expose."""
        return self.aliases.merge(PluginInfoSet(self.providers.infos()))

    def converter(self, text: str) -> Any:
        selector = self.aliases.selector(HELPER.parse_selector(text))
        return self.providers.get(selector, self.context)

    def convert(self, text: str, value: Any) -> str:
        """Convert a cell value with the converter named by text."""
        return self.converter(text).convert(value)
