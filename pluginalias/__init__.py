"""
pluginalias: Plugin Naming Metadata
===================================

Parses, validates and merges the naming metadata of plugins: the names and
urls a provider publishes, and the aliases a consumer declares on top of
them to rename, parameterize or restrict what is visible.

Stability Guarantees (v1.x)
---------------------------
All symbols exported from this module are part of the **public API**
and follow semantic versioning. The alias list text accepted by
``PluginAliasSet.parse`` and produced by ``PluginAliasSet.text`` is part
of that contract.

What's Public
-------------
Everything exported in ``__all__`` is public and stable:

- **Values**: PluginName, PluginNameSet, AbsoluteUrl, Selector, PluginInfo,
  PluginInfoSet, PluginAlias, PluginAliasSet
- **Resolution**: PluginHelper, ProviderMapper, MappingPolicy,
  FilteredProviderGuard
- **Providers**: Provider, BasicProvider, MappedProvider,
  ProviderCollection, ProviderContext
- **Configuration**: PluginNamingConfig, load_config
- **Exceptions**: every error raised by the above

What's Internal
---------------
- ``pluginalias.parser``: the cursor used by every parse() method
- ``pluginalias.printer``: tree_print() rendering
- Any symbol prefixed with underscore (``_``)

Example
-------
::

    from pluginalias import PluginAliasSet, PluginInfoSet

    aliases = PluginAliasSet.parse("plugin111, alias222 plugin222")
    provider = PluginInfoSet.parse(
        "https://example.com/111 plugin111, https://example.com/222 plugin222"
    )
    aliases.merge(provider).text()
    # 'https://example.com/222 alias222, https://example.com/111 plugin111'
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API: All symbols below are stable for v1.x
# =============================================================================

__all__ = [
    # --- Package Metadata ---
    "__version__",

    # --- Names ---
    "CaseSensitivity",
    "PluginName",
    "PluginNameSet",

    # --- Urls ---
    "AbsoluteUrl",

    # --- Selectors ---
    "Selector",

    # --- Infos ---
    "PluginInfo",
    "PluginInfoSet",

    # --- Aliases ---
    "PluginAlias",
    "PluginAliasSet",

    # --- Resolution ---
    "PluginHelper",
    "MappingPolicy",
    "ProviderMapper",
    "FilteredProviderGuard",

    # --- Providers ---
    "Provider",
    "BasicProvider",
    "MappedProvider",
    "ProviderCollection",
    "ProviderContext",

    # --- Configuration ---
    "PluginNamingConfig",
    "load_config",

    # --- Errors ---
    "ErrorLocation",
    "PluginError",
    "ImmutabilityError",
    "ParseError",
    "InvalidCharacterError",
    "UnterminatedError",
    "InvalidNameError",
    "NameLengthError",
    "InvalidUrlError",
    "PluginValidationError",
    "DuplicateNameError",
    "DuplicateUrlError",
    "DuplicateAliasError",
    "DuplicateAliasTargetError",
    "MissingSelectorError",
    "EmptyProvidersError",
    "InvalidLabelError",
    "ResolutionError",
    "UnknownNameError",
    "AmbiguousNameError",
    "AliasParametersError",
    "UnknownEnvironmentValueError",
    "format_error_for_user",
]

# =============================================================================
# IMPORTS
# =============================================================================

from pluginalias.alias import PluginAlias
from pluginalias.alias_set import PluginAliasSet
from pluginalias.config import PluginNamingConfig, load_config
from pluginalias.errors import (
    AliasParametersError,
    AmbiguousNameError,
    DuplicateAliasError,
    DuplicateAliasTargetError,
    DuplicateNameError,
    DuplicateUrlError,
    EmptyProvidersError,
    ErrorLocation,
    ImmutabilityError,
    InvalidCharacterError,
    InvalidLabelError,
    InvalidNameError,
    InvalidUrlError,
    MissingSelectorError,
    NameLengthError,
    ParseError,
    PluginError,
    PluginValidationError,
    ResolutionError,
    UnknownEnvironmentValueError,
    UnknownNameError,
    UnterminatedError,
    format_error_for_user,
)
from pluginalias.helper import PluginHelper
from pluginalias.info import PluginInfo, PluginInfoSet
from pluginalias.mapper import FilteredProviderGuard, MappingPolicy, ProviderMapper
from pluginalias.name import CaseSensitivity, PluginName
from pluginalias.name_set import PluginNameSet
from pluginalias.provider import (
    BasicProvider,
    MappedProvider,
    Provider,
    ProviderCollection,
    ProviderContext,
)
from pluginalias.selector import Selector
from pluginalias.url import AbsoluteUrl
