"""
helper.py

PluginHelper: the label and case-sensitivity policy shared by everything
built for one kind of plugin (for example "Converter" or "Function").
"""

from dataclasses import dataclass

from pluginalias.errors import InvalidLabelError, UnknownNameError
from pluginalias.info import PluginInfo, PluginInfoSet
from pluginalias.name import CaseSensitivity, PluginName
from pluginalias.name_set import PluginNameSet
from pluginalias.selector import Selector


@dataclass(frozen=True)
class PluginHelper:
    """Factories that parse names, selectors and infos under one policy."""
    label: str = "Plugin"
    case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE

    def __post_init__(self):
        if not isinstance(self.label, str) or not self.label.strip():
            raise InvalidLabelError(self.label)
        if not isinstance(self.case_sensitivity, CaseSensitivity):
            raise TypeError(
                f"case_sensitivity must be CaseSensitivity, got {type(self.case_sensitivity).__name__}"
            )

    def name(self, text: str) -> PluginName:
        """Build a name without grammar checks."""
        return PluginName(text, self.case_sensitivity)

    def parse_name(self, text: str) -> PluginName:
        return PluginName.parse(text, self.case_sensitivity)

    def parse_name_set(self, text: str) -> PluginNameSet:
        return PluginNameSet.parse(text, self.case_sensitivity)

    def parse_selector(self, text: str) -> Selector:
        return Selector.parse(text, self.case_sensitivity)

    def parse_info(self, text: str) -> PluginInfo:
        return PluginInfo.parse(text, self.case_sensitivity)

    def parse_info_set(self, text: str) -> PluginInfoSet:
        return PluginInfoSet.parse(text, self.case_sensitivity)

    def parse_alias_set(self, text: str):
        from pluginalias.alias_set import PluginAliasSet

        return PluginAliasSet.parse(text, self)

    def unknown_name(self, name: PluginName) -> UnknownNameError:
        return UnknownNameError(self.label, str(name))
