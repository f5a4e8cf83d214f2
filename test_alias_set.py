"""
test_alias_set.py

Tests for PluginAlias and PluginAliasSet.

Tests cover:
- Parsing alias lists and error positions
- Duplicate detection
- Canonical text
- Merging with provider infos
- Selector resolution
- Copy-on-write edits
- JSON and tree printing
- Parsing speed for large lists
"""

import json
import logging
import time

import pytest

from pluginalias import (
    AbsoluteUrl,
    AliasParametersError,
    CaseSensitivity,
    DuplicateAliasError,
    DuplicateAliasTargetError,
    DuplicateUrlError,
    ImmutabilityError,
    InvalidCharacterError,
    MissingSelectorError,
    PluginAlias,
    PluginAliasSet,
    PluginHelper,
    PluginInfoSet,
    PluginName,
    Selector,
    UnknownNameError,
    UnterminatedError,
)
from pluginalias.printer import tree_print


def name(text):
    return PluginName(text)


# =============================================================================
# PluginAlias
# =============================================================================

class TestPluginAlias:
    """Tests for a single alias entry."""

    def test_plain_name(self):
        """A name without a selector is a pass-through."""
        alias = PluginAlias(name("plugin111"))
        assert not alias.is_alias
        assert alias.target == name("plugin111")
        assert alias.text() == "plugin111"

    def test_alias_with_url(self):
        """Text lists name, selector and url."""
        alias = PluginAlias(
            name("alias111"),
            Selector.parse("plugin111(1)"),
            AbsoluteUrl("https://example.com/alias111"),
        )
        assert alias.is_alias
        assert alias.target == name("plugin111")
        assert alias.text() == "alias111 plugin111(1) https://example.com/alias111"
        assert alias.text_and_space() == alias.text() + " "

    def test_url_needs_selector(self):
        """A url without a selector is rejected."""
        with pytest.raises(MissingSelectorError):
            PluginAlias(name("alias111"), None, AbsoluteUrl("https://example.com/1"))

    def test_ordering(self):
        """Absent selector and url sort first."""
        plain = PluginAlias(name("a"))
        aliased = PluginAlias(name("a"), Selector.parse("b"))
        with_url = PluginAlias(name("a"), Selector.parse("b"), AbsoluteUrl("https://example.com/a"))
        assert sorted([with_url, aliased, plain]) == [plain, aliased, with_url]

    def test_immutable(self):
        """Aliases cannot change."""
        with pytest.raises(ImmutabilityError):
            PluginAlias(name("a"))._url = None


# =============================================================================
# Parsing
# =============================================================================

class TestAliasSetParse:
    """Tests for PluginAliasSet.parse()."""

    def test_empty(self):
        """Blank text is the empty set."""
        assert len(PluginAliasSet.parse("")) == 0
        assert len(PluginAliasSet.parse(" ")) == 0

    def test_single_name(self):
        """A lone name is a pass-through."""
        aliases = PluginAliasSet.parse("plugin111")
        assert aliases.name(name("plugin111")) == name("plugin111")
        assert PluginAliasSet.parse("plugin111 ") == aliases

    def test_alias_with_url(self):
        """An alias with a url round-trips."""
        text = "alias111 plugin111 https://example.com/alias111"
        aliases = PluginAliasSet.parse(text)
        assert aliases.text() == text
        assert aliases.infos.text() == "https://example.com/alias111 alias111"

    def test_empty_parameters(self):
        """Empty parameter lists may contain spaces."""
        aliases = PluginAliasSet.parse("alias111 plugin111( ) https://example.com/plugin111")
        assert aliases.alias_selector(name("alias111")).parameter_text == "( )"

    def test_parameter_values(self):
        """Numbers, environment values and strings are accepted."""
        aliases = PluginAliasSet.parse('alias111 plugin111(888,$Magic,"Hello")')
        selector = aliases.alias_selector(name("alias111"))
        assert selector.text() == 'plugin111(888,$Magic,"Hello")'

    def test_space_before_parameters(self):
        """Spaces may separate a selector name from its parameters."""
        aliases = PluginAliasSet.parse("alias111 plugin111 (1)")
        selector = aliases.alias_selector(name("alias111"))
        assert selector.name == name("plugin111")
        assert selector.parameter_text == " (1)"
        assert selector.evaluate_value_text() == [1]
        assert PluginAliasSet.parse(aliases.text()) == aliases

    def test_space_before_parameters_with_url(self):
        """A url may follow a spaced parameter list."""
        aliases = PluginAliasSet.parse("alias111 plugin111 (1) https://example.com/a")
        assert aliases.alias_selector(name("alias111")).text() == "plugin111 (1)"
        assert aliases.infos.text() == "https://example.com/a alias111"

    def test_unclosed_parameters(self):
        """An open paren that is never closed is reported."""
        with pytest.raises(UnterminatedError) as exc_info:
            PluginAliasSet.parse("alias111 plugin111(")
        assert exc_info.value.message == "Missing terminating ')'"
        assert exc_info.value.position == 18

    def test_unclosed_parameters_after_value(self):
        """The open paren is named even when values follow it."""
        with pytest.raises(UnterminatedError) as exc_info:
            PluginAliasSet.parse("alias111 plugin111(1")
        assert exc_info.value.position == 18

    def test_unterminated_string(self):
        """An unclosed string is reported."""
        with pytest.raises(UnterminatedError):
            PluginAliasSet.parse('alias111 plugin111( "Hello')

    def test_invalid_first_character(self):
        """A list must start with a name."""
        with pytest.raises(InvalidCharacterError) as exc_info:
            PluginAliasSet.parse("[abs")
        assert exc_info.value.character == "["
        assert exc_info.value.position == 0

    def test_trailing_comma(self):
        """A dangling separator reports the last character."""
        with pytest.raises(InvalidCharacterError) as exc_info:
            PluginAliasSet.parse("plugin111, ")
        assert exc_info.value.character == " "
        assert exc_info.value.position == 10

    def test_url_absorbs_comma(self):
        """A url runs to the next space, so a comma touching it is part of it."""
        aliases = PluginAliasSet.parse("alias111 plugin111 https://example.com/1,plugin222")
        assert len(aliases) == 1
        assert aliases.infos.urls == {AbsoluteUrl("https://example.com/1,plugin222")}

    def test_missing_separator(self):
        """Entries are separated by commas."""
        with pytest.raises(InvalidCharacterError) as exc_info:
            PluginAliasSet.parse("alias111 plugin111 plugin222")
        assert exc_info.value.position == 19


# =============================================================================
# Duplicates
# =============================================================================

class TestAliasSetDuplicates:
    """Tests for duplicate detection."""

    def test_duplicate_alias(self):
        """One alias name may not be declared twice."""
        with pytest.raises(DuplicateAliasError) as exc_info:
            PluginAliasSet.parse("alias111 plugin111, alias111 plugin333")
        assert exc_info.value.message == "Duplicate name/alias: alias111"

    def test_alias_targets_plain_name(self):
        """An alias may not rename a name also listed plainly."""
        with pytest.raises(DuplicateAliasError) as exc_info:
            PluginAliasSet.parse("alias111 plugin111, plugin111")
        assert exc_info.value.message == "Duplicate name/alias: alias111"

    def test_two_aliases_one_target(self):
        """Two aliases without urls may not rename the same target."""
        with pytest.raises(DuplicateAliasTargetError) as exc_info:
            PluginAliasSet.parse("alias111 plugin111, alias222 plugin111")
        assert exc_info.value.message == "Duplicate alias: alias111 and alias222"

    def test_two_aliases_one_target_with_other_names(self):
        """Unrelated entries do not change the error."""
        with pytest.raises(DuplicateAliasTargetError) as exc_info:
            PluginAliasSet.parse("alias111 plugin111, alias222 plugin111, plugin222")
        assert exc_info.value.message == "Duplicate alias: alias111 and alias222"

    def test_aliases_with_urls_share_target(self):
        """Aliases introducing their own url may share a target."""
        aliases = PluginAliasSet.parse(
            "alias111 plugin111 https://example.com/a , "
            "alias222 plugin111 https://example.com/b"
        )
        assert len(aliases) == 2

    def test_duplicate_url(self):
        """Alias urls are unique."""
        with pytest.raises(DuplicateUrlError):
            PluginAliasSet.parse(
                "alias111 plugin111 https://example.com/1 , "
                "alias222 plugin222 https://example.com/1"
            )

    def test_insensitive_duplicate(self):
        """Duplicates follow the helper's case policy."""
        helper = PluginHelper("Plugin", CaseSensitivity.INSENSITIVE)
        with pytest.raises(DuplicateAliasError):
            PluginAliasSet.parse("Alias1 x, alias1 y", helper)


# =============================================================================
# Indexes and text
# =============================================================================

class TestAliasSetIndexes:
    """Tests for derived indexes and canonical text."""

    ALIASES = PluginAliasSet.parse(
        "plugin111, alias222 plugin222, alias333 plugin333 https://example.com/alias333"
    )

    def test_indexes(self):
        """Every index is derived from the entries."""
        aliases = self.ALIASES
        assert aliases.alias_selector_names.text() == "alias222, alias333"
        assert aliases.name_to_name == {name("plugin111"): name("plugin111")}
        assert aliases.names.text() == "plugin111, plugin222, plugin333"
        assert aliases.aliases_without_infos.text() == "alias222"
        assert aliases.infos.text() == "https://example.com/alias333 alias333"

    def test_alias_or_name(self):
        """Aliases resolve to their target, names to themselves."""
        aliases = self.ALIASES
        assert aliases.alias_or_name(name("alias222")) == name("plugin222")
        assert aliases.alias_or_name(name("plugin111")) == name("plugin111")
        assert aliases.alias_or_name(name("plugin222")) is None
        assert aliases.contains_alias_or_name(name("alias333"))

    def test_maps_are_copies(self):
        """Returned maps cannot change the set."""
        self.ALIASES.alias_to_selector.clear()
        assert len(self.ALIASES.alias_to_selector) == 2

    def test_text_normalizes_spaces(self):
        """Extra spaces are dropped."""
        assert PluginAliasSet.parse("alias111   name111").text() == "alias111 name111"

    def test_text_sorted(self):
        """Entries are written in order."""
        aliases = PluginAliasSet.parse("zzz, bbb plugin1, aaa")
        assert aliases.text() == "aaa, bbb plugin1, zzz"

    def test_text_space_after_url(self):
        """A url is followed by a space before the separator."""
        aliases = PluginAliasSet.parse("alias111 plugin111 https://example.com/1 , plugin222")
        assert aliases.text() == "alias111 plugin111 https://example.com/1 , plugin222"
        assert PluginAliasSet.parse(aliases.text()) == aliases

    def test_immutable(self):
        """Alias sets cannot change."""
        with pytest.raises(ImmutabilityError):
            self.ALIASES._aliases = ()


# =============================================================================
# Merge
# =============================================================================

class TestAliasSetMerge:
    """Tests for merge()."""

    PROVIDER = PluginInfoSet.parse(
        "https://example.com/111 plugin111, "
        "https://example.com/222 plugin222, "
        "https://example.com/333 plugin333"
    )

    def test_merge(self):
        """Names pass through and aliases take the target url."""
        aliases = PluginAliasSet.parse("plugin111, alias222 plugin222")
        merged = aliases.merge(self.PROVIDER)
        assert merged.text() == (
            "https://example.com/222 alias222, https://example.com/111 plugin111"
        )

    def test_merge_introduced_url(self):
        """An alias with its own url publishes that url."""
        aliases = PluginAliasSet.parse(
            "plugin111, alias222 plugin222 https://example.com/alias222"
        )
        merged = aliases.merge(self.PROVIDER)
        assert merged.text() == (
            "https://example.com/alias222 alias222, https://example.com/111 plugin111"
        )

    def test_merge_drops_unknown(self):
        """Names and targets the provider lacks are dropped."""
        aliases = PluginAliasSet.parse("plugin111, missing, alias999 plugin999")
        assert aliases.merge(self.PROVIDER).names.text() == "plugin111"

    def test_merge_logs_drops(self, caplog):
        """Dropped entries are logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="pluginalias.alias_set"):
            PluginAliasSet.parse("missing").merge(self.PROVIDER)
        assert "Dropping Plugin missing missing from provider" in caplog.text

    def test_merge_insensitive_against_default_provider(self):
        """An insensitive set matches provider names ignoring case."""
        helper = PluginHelper("Plugin", CaseSensitivity.INSENSITIVE)
        aliases = PluginAliasSet.parse("PLUGIN111, Alias222 Plugin222", helper)
        merged = aliases.merge(self.PROVIDER)
        assert merged.text() == (
            "https://example.com/222 Alias222, https://example.com/111 plugin111"
        )

    def test_merge_sensitive_keeps_case(self):
        """A sensitive set does not match names differing in case."""
        assert PluginAliasSet.parse("PLUGIN111").merge(self.PROVIDER).is_empty()

    def test_merge_empty(self):
        """An empty alias set shows nothing."""
        assert PluginAliasSet.parse("").merge(self.PROVIDER).is_empty()


# =============================================================================
# Selector resolution
# =============================================================================

class TestAliasSetSelector:
    """Tests for selector()."""

    ALIASES = PluginAliasSet.parse(
        'alias111 plugin111("Hello"), alias222 plugin222, plugin333'
    )

    def test_alias_parameters(self):
        """An alias stands for its selector, parameters included."""
        resolved = self.ALIASES.selector(Selector.parse("alias111"))
        assert resolved.text() == 'plugin111("Hello")'

    def test_caller_parameters(self):
        """Caller parameters carry across to an alias without any."""
        resolved = self.ALIASES.selector(Selector.parse("alias222(1)"))
        assert resolved.text() == "plugin222(1)"

    def test_both_parameters(self):
        """Alias and caller may not both supply parameters."""
        with pytest.raises(AliasParametersError) as exc_info:
            self.ALIASES.selector(Selector.parse("alias111(1)"))
        assert exc_info.value.message == "Alias alias111 should not have any parameters"

    def test_plain_name(self):
        """Plain names resolve to themselves."""
        selector = Selector.parse("plugin333(2)")
        assert self.ALIASES.selector(selector) is selector

    def test_unknown(self):
        """Unknown names carry the helper label."""
        with pytest.raises(UnknownNameError) as exc_info:
            self.ALIASES.selector(Selector.parse("plugin111"))
        assert exc_info.value.message == "Unknown Plugin plugin111"


# =============================================================================
# Edits
# =============================================================================

class TestAliasSetEdits:
    """Tests for copy-on-write edits."""

    ALIASES = PluginAliasSet.parse("plugin111, alias222 plugin222")

    def test_concat(self):
        """concat adds an entry, or returns self if present."""
        added = self.ALIASES.concat(PluginAlias(name("plugin333")))
        assert added.text() == "alias222 plugin222, plugin111, plugin333"
        assert self.ALIASES.concat(PluginAlias(name("plugin111"))) is self.ALIASES

    def test_concat_duplicate_name(self):
        """concat validates the new set."""
        with pytest.raises(DuplicateAliasError):
            self.ALIASES.concat(PluginAlias(name("plugin111"), Selector.parse("plugin999")))

    def test_concat_all(self):
        """concat_all adds several entries."""
        added = self.ALIASES.concat_all([PluginAlias(name("a")), PluginAlias(name("b"))])
        assert len(added) == 4
        assert self.ALIASES.concat_all([]) is self.ALIASES

    def test_concat_or_replace(self):
        """An entry with the same name is replaced."""
        replaced = self.ALIASES.concat_or_replace(
            PluginAlias(name("alias222"), Selector.parse("plugin333"))
        )
        assert replaced.text() == "alias222 plugin333, plugin111"

    def test_delete_and_replace(self):
        """delete and replace return new sets."""
        plain = PluginAlias(name("plugin111"))
        assert self.ALIASES.delete(plain).text() == "alias222 plugin222"
        replaced = self.ALIASES.replace(plain, PluginAlias(name("plugin999")))
        assert replaced.text() == "alias222 plugin222, plugin999"
        assert self.ALIASES.replace(PluginAlias(name("x")), plain) is self.ALIASES

    def test_delete_all(self):
        """delete_all removes every listed entry."""
        assert len(self.ALIASES.delete_all(self.ALIASES.aliases)) == 0

    def test_delete_alias_or_name(self):
        """Entries named by or targeting the name are removed."""
        assert self.ALIASES.delete_alias_or_name(name("plugin222")).text() == "plugin111"
        assert self.ALIASES.delete_alias_or_name(name("alias222")).text() == "plugin111"
        assert self.ALIASES.delete_alias_or_name(name("nothing")) is self.ALIASES

    def test_keep_alias_or_name_all(self):
        """Only entries named by or targeting the names are kept."""
        kept = self.ALIASES.keep_alias_or_name_all([name("plugin222")])
        assert kept.text() == "alias222 plugin222"


# =============================================================================
# Serialization
# =============================================================================

class TestAliasSetSerialization:
    """Tests for JSON, text and tree printing."""

    def test_json_round_trip(self):
        """Alias sets marshal to their text."""
        aliases = PluginAliasSet.parse('plugin111, alias222 plugin222("x")')
        assert json.loads(aliases.to_json()) == 'alias222 plugin222("x"), plugin111'
        assert PluginAliasSet.from_json(aliases.to_json()) == aliases

    def test_from_json_requires_string(self):
        """Only a JSON string is accepted."""
        with pytest.raises(TypeError):
            PluginAliasSet.from_json("[]")

    def test_tree_print(self):
        """Selectors and urls print beneath their alias."""
        aliases = PluginAliasSet.parse("name1, alias2 name2 https://example.com/name2")
        assert tree_print(aliases) == "alias2\n  name2\n  https://example.com/name2\nname1\n"

    def test_from_infos(self):
        """Info names become plain entries."""
        infos = PluginInfoSet.parse("https://example.com/1 b, https://example.com/2 a")
        assert PluginAliasSet.from_infos(infos).text() == "a, b"


# =============================================================================
# Performance
# =============================================================================

class TestAliasSetPerformance:
    """Parsing stays linear in the size of the list."""

    @staticmethod
    def best_time(text, repeat):
        """Fastest of three runs parsing text repeat times."""
        best = None
        for _ in range(3):
            start = time.perf_counter()
            for _ in range(repeat):
                PluginAliasSet.parse(text)
            elapsed = time.perf_counter() - start
            best = elapsed if best is None else min(best, elapsed)
        return best

    def test_parse_plain_names(self):
        """500 plain names parse 1000 times within a few seconds."""
        text = ", ".join(f"plugin{i}" for i in range(500))
        assert len(PluginAliasSet.parse(text)) == 500
        start = time.perf_counter()
        for _ in range(1000):
            PluginAliasSet.parse(text)
        assert time.perf_counter() - start < 10

    def test_plain_names_scale_linearly(self):
        """Ten times the names costs about ten times as much."""
        small = ", ".join(f"plugin{i}" for i in range(500))
        large = ", ".join(f"plugin{i}" for i in range(5000))
        assert self.best_time(large, 10) < 20 * self.best_time(small, 10)

    def test_aliases_scale_linearly(self):
        """Aliases with parameters and urls scale the same way."""
        def aliases(count):
            return ", ".join(
                f"alias{i} plugin{i} (1) https://example.com/{i} " for i in range(count)
            )

        small = aliases(500)
        large = aliases(5000)
        assert len(PluginAliasSet.parse(large)) == 5000
        assert self.best_time(large, 5) < 20 * self.best_time(small, 5)
