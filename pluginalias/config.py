"""
Pydantic model for plugin naming configuration.
Loads from YAML files such as::

    label: Converter
    case_sensitivity: insensitive
    policy: merged
    aliases: >-
      number-to-text, percent percent-to-text("0.00") https://example.com/percent
    infos:
      - https://example.com/number-to-text number-to-text
      - https://example.com/percent-to-text percent-to-text
"""

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from pluginalias.alias_set import PluginAliasSet
from pluginalias.errors import PluginError
from pluginalias.helper import PluginHelper
from pluginalias.info import PluginInfoSet
from pluginalias.mapper import MappingPolicy, ProviderMapper
from pluginalias.name import CaseSensitivity


class PluginNamingConfig(BaseModel):
    """Alias and provider info text for one kind of plugin, validated on load."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str = "Plugin"
    case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE
    policy: MappingPolicy = MappingPolicy.MERGED

    # alias list text
    aliases: str = ""

    # provider info set text
    infos: Optional[str] = None

    @field_validator("label")
    @classmethod
    def nonempty_label(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("label must not be empty or whitespace-only")
        return v

    @field_validator("case_sensitivity", "policy", mode="before")
    @classmethod
    def lower_enum_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("aliases", "infos", mode="before")
    @classmethod
    def join_entries(cls, v: Any) -> Any:
        """YAML lists are accepted and joined into comma separated text."""
        if isinstance(v, (list, tuple)):
            return ", ".join(str(entry).strip() for entry in v)
        return v

    @model_validator(mode="after")
    def parse_text(self) -> "PluginNamingConfig":
        # errors surface as pydantic ValidationError carrying the plain message
        try:
            self.alias_set()
            self.info_set()
        except PluginError as e:
            raise ValueError(e.message) from e
        return self

    def helper(self) -> PluginHelper:
        return PluginHelper(self.label, self.case_sensitivity)

    def alias_set(self) -> PluginAliasSet:
        return PluginAliasSet.parse(self.aliases, self.helper())

    def info_set(self) -> PluginInfoSet:
        """The configured provider infos, empty when none are given."""
        if self.infos is None:
            return PluginInfoSet()
        return PluginInfoSet.parse(self.infos, self.case_sensitivity)

    def mapper(self, provider_infos: Optional[PluginInfoSet] = None) -> ProviderMapper:
        """Map the configured aliases onto provider infos, defaulting to info_set()."""
        if provider_infos is None:
            provider_infos = self.info_set()
        return ProviderMapper.from_aliases(self.policy, self.alias_set(), provider_infos)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "PluginNamingConfig":
        """Load config from a YAML file."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"{yaml_path}: expected a mapping, got {type(data).__name__}")
        return cls(**data)


def load_config(yaml_path: Union[str, Path]) -> PluginNamingConfig:
    """Load a PluginNamingConfig from YAML."""
    return PluginNamingConfig.from_yaml(yaml_path)
