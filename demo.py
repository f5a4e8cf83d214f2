"""
demo.py

Minimal CLI demo for plugin naming metadata.
- Parses a hardcoded alias list (simulating a user's configuration)
- Merges it with the infos a provider publishes
- Prints the visible infos, each mapping policy's view and a tree print
"""

import sys

from pluginalias import (
    MappingPolicy,
    PluginAliasSet,
    PluginError,
    PluginHelper,
    PluginInfoSet,
    ProviderMapper,
    format_error_for_user,
)
from pluginalias.printer import tree_print


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    helper = PluginHelper("Converter")

    # --- Hardcoded provider infos (what an installed plugin publishes) ---
    provider = helper.parse_info_set(
        "https://example.com/converter/number-to-text number-to-text, "
        "https://example.com/converter/percent-to-text percent-to-text, "
        "https://example.com/converter/date-to-text date-to-text"
    )

    # --- Alias list, from the command line or a default ---
    text = argv[0] if argv else (
        'number-to-text, money number-to-text(2) https://example.com/money , '
        'percent percent-to-text'
    )

    try:
        aliases = helper.parse_alias_set(text)
    except PluginError as e:
        print(format_error_for_user(e))
        return 1

    print("Aliases:")
    print(f"  {aliases.text()}")

    print("\nVisible infos:")
    print(f"  {aliases.merge(provider).text()}")

    for policy in MappingPolicy:
        mapper = ProviderMapper.from_aliases(policy, aliases, provider)
        print(f"\n{policy.name}:")
        print(f"  {mapper}")

    print("\nTree:")
    print(tree_print(aliases), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
