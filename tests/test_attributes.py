"""Tests for attribute, shortcut and hashtag extraction."""

from datetime import date

import pytest

from taskline.attributes import AttributeParser, parse_hashtags
from taskline.config import CustomShortcut, Settings, ShortcutSettings
from taskline.models import ParsedAttributes

TODAY = date(2025, 1, 15)


@pytest.fixture
def parser():
    return AttributeParser()


@pytest.fixture
def strict():
    return AttributeParser(Settings(), today=TODAY)


def _strict(**shortcuts):
    return AttributeParser(Settings(shortcuts=ShortcutSettings(**shortcuts)), today=TODAY)


# ===================================================================
# Bracketed fields
# ===================================================================


def test_bracketed_attribute(parser):
    result = parser.parse_attributes("Buy groceries [due:: 2025-01-15]")
    assert result.text == "Buy groceries"
    assert result.attributes == {"due": "2025-01-15"}


def test_multiple_bracketed_attributes(parser):
    result = parser.parse_attributes("Task [due:: 2025-01-15] [priority:: high]")
    assert result.text == "Task"
    assert result.attributes == {"due": "2025-01-15", "priority": "high"}


def test_bracketed_key_and_value_are_trimmed(parser):
    result = parser.parse_attributes("Task [ owner ::  Ann Lee ]")
    assert result.attributes == {"owner": "Ann Lee"}


def test_bracketed_keys_keep_their_case(parser):
    result = parser.parse_attributes("Task [Owner:: Ann]")
    assert result.attributes == {"Owner": "Ann"}


def test_bracketed_true_reads_as_boolean(parser):
    result = parser.parse_attributes("Task [selected:: true]")
    assert result.attributes == {"selected": True}


def test_text_without_attributes_is_untouched(parser):
    result = parser.parse_attributes("Plain  task text")
    assert result.text == "Plain  task text"
    assert result.attributes == {}


def test_removal_collapses_whitespace(parser):
    result = parser.parse_attributes("Call [who:: Bob]  about   it")
    assert result.text == "Call about it"


def test_wiki_links_are_not_attributes(parser):
    result = parser.parse_attributes("Read [[Some Note]] first")
    assert result.text == "Read [[Some Note]] first"
    assert result.attributes == {}


# ===================================================================
# Shortcuts without settings
# ===================================================================


def test_shortcut_is_boolean(parser):
    result = parser.parse_attributes("Important task @urgent")
    assert result.text == "Important task"
    assert result.attributes == {"urgent": True}


@pytest.mark.parametrize("level", ["critical", "high", "medium", "low", "lowest"])
def test_priority_shortcuts(parser, level):
    result = parser.parse_attributes(f"Task @{level}")
    assert result.text == "Task"
    assert result.attributes == {"priority": level}


def test_priority_shortcut_is_case_insensitive(parser):
    assert parser.parse_attributes("Task @HIGH").attributes == {"priority": "high"}


def test_mixed_bracketed_and_shortcut(parser):
    result = parser.parse_attributes("Task [due:: 2025-01-15] @high")
    assert result.text == "Task"
    assert result.attributes == {"due": "2025-01-15", "priority": "high"}


def test_shortcut_with_value(parser):
    result = parser.parse_attributes("Task @due(2025-01-20) @priority(high)")
    assert result.text == "Task"
    assert result.attributes == {"due": "2025-01-20", "priority": "high"}


def test_shortcut_with_empty_value_is_boolean(parser):
    assert parser.parse_attributes("Task @flag()").attributes == {"flag": True}


def test_unclosed_parenthesis_is_not_a_shortcut(parser):
    result = parser.parse_attributes("Task @due(tomorrow")
    assert result.text == "Task @due(tomorrow"
    assert result.attributes == {}


def test_mentions_inside_wiki_links_are_ignored(parser):
    result = parser.parse_attributes("Speak to [[@jon do]] about x")
    assert result.text == "Speak to [[@jon do]] about x"
    assert result.attributes == {}
    assert result.tags == []


# ===================================================================
# Shortcut policy
# ===================================================================


class TestShortcutPolicy:
    def test_disabled_shortcuts_stay_in_text(self):
        result = _strict(enabled=False).parse_attributes("Task @high [due:: 2025-01-20]")
        assert result.text == "Task @high"
        assert result.attributes == {"due": "2025-01-20"}

    def test_disabled_shortcuts_ignore_explicit_values(self):
        result = _strict(enabled=False).parse_attributes("Task @due(friday)")
        assert result.text == "Task @due(friday)"
        assert result.attributes == {}

    def test_unknown_keyword_stays_in_text(self, strict):
        result = strict.parse_attributes("Mail bob @someone")
        assert result.text == "Mail bob @someone"
        assert result.attributes == {}

    def test_date_keyword(self, strict):
        assert strict.parse_attributes("Task @tomorrow").attributes == {"tomorrow": True}
        assert strict.parse_attributes("Task @fri").attributes == {"fri": True}

    def test_date_keyword_disabled(self):
        result = _strict(dates=False).parse_attributes("Task @tomorrow")
        assert result.attributes == {}

    def test_priority_disabled(self):
        result = _strict(priorities=False).parse_attributes("Task @high")
        assert result.text == "Task @high"
        assert result.attributes == {}

    def test_selected_builtin(self, strict):
        assert strict.parse_attributes("Task @selected").attributes == {"selected": True}

    def test_selected_uses_configured_attribute(self):
        parser = AttributeParser(Settings(selected_attribute="focus"), today=TODAY)
        assert parser.parse_attributes("Task @Selected").attributes == {"focus": True}

    def test_builtins_disabled(self):
        assert _strict(builtins=False).parse_attributes("Task @selected").attributes == {}

    def test_custom_shortcut(self):
        parser = _strict(custom=(CustomShortcut("waiting", "status", "blocked"),))
        result = parser.parse_attributes("Task @Waiting")
        assert result.text == "Task"
        assert result.attributes == {"status": "blocked"}

    def test_priority_shadows_custom_shortcut(self):
        parser = _strict(custom=(CustomShortcut("high", "urgency", "max"),))
        assert parser.parse_attributes("Task @high").attributes == {"priority": "high"}


# ===================================================================
# Hashtags
# ===================================================================


def test_hashtags_stay_in_text(parser):
    result = parser.parse_attributes("Buy milk #shopping")
    assert result.text == "Buy milk #shopping"
    assert result.tags == ["shopping"]


def test_multiple_hashtags(parser):
    assert parser.parse_attributes("Task #work #urgent").tags == ["work", "urgent"]


def test_pure_number_hashtags_are_ignored(parser):
    assert parser.parse_attributes("Issue #123").tags == []


def test_hashtags_with_hyphens_digits_and_underscores(parser):
    result = parser.parse_attributes("Task #my-project #work_item #project2024")
    assert result.tags == ["my-project", "work_item", "project2024"]


def test_hashtags_are_deduplicated(parser):
    assert parser.parse_attributes("Task #shopping more #shopping").tags == ["shopping"]


def test_hashtags_with_attributes(parser):
    result = parser.parse_attributes("Task #urgent [due:: 2025-01-15]")
    assert result.text == "Task #urgent"
    assert result.attributes == {"due": "2025-01-15"}
    assert result.tags == ["urgent"]


def test_hashtags_inside_wiki_links_are_ignored():
    assert parse_hashtags("See [[Notes#heading]] and #real") == ["real"]


# ===================================================================
# Serialization
# ===================================================================


def test_serialize_attribute(parser):
    parsed = ParsedAttributes(text="Buy groceries", attributes={"due": "2025-01-15"})
    assert parser.attributes_to_string(parsed) == "Buy groceries [due:: 2025-01-15]"


def test_serialize_boolean(parser):
    parsed = ParsedAttributes(text="Task", attributes={"selected": True})
    assert parser.attributes_to_string(parsed) == "Task [selected:: true]"


def test_serialize_skips_false(parser):
    parsed = ParsedAttributes(text="Task", attributes={"selected": False, "due": "x"})
    assert parser.attributes_to_string(parsed) == "Task [due:: x]"


def test_serialize_keeps_insertion_order(parser):
    parsed = ParsedAttributes(text="Task", attributes={"z": "1", "a": "2"})
    assert parser.attributes_to_string(parsed) == "Task [z:: 1] [a:: 2]"


def test_serialize_without_attributes(parser):
    parsed = ParsedAttributes(text="Plain task")
    assert parser.attributes_to_string(parsed) == "Plain task"


@pytest.mark.parametrize(
    "attributes",
    [
        {},
        {"due": "2025-01-15"},
        {"due": "2025-01-15", "priority": "high", "selected": True},
        {"Owner": "Ann Lee", "estimate": "3h"},
    ],
)
def test_attribute_round_trip(parser, attributes):
    text = parser.attributes_to_string(ParsedAttributes(text="T", attributes=attributes))
    assert parser.parse_attributes(text).attributes == attributes
