"""Tests for the rule-based exclusion extractor."""

import re

import pytest

from group_settle.exclusions import EXCLUSION_RULES, ExclusionRule, extract_exclusions

PARTICIPANTS = ["Alice", "Bob", "Carol"]


class TestKeywordRule:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("exclude Alice", ["Alice"]),
            ("dinner without Carol", ["Carol"]),
            ("everyone except bob", ["Bob"]),
            ("pizza, not including Carol", ["Carol"]),
            ("groceries minus Alice", ["Alice"]),
        ],
    )
    def test_keywords(self, text, expected):
        assert extract_exclusions(text, PARTICIPANTS) == expected

    def test_case_insensitive(self):
        """The roster's spelling is returned, whatever the input casing."""
        assert extract_exclusions("exclude ALICE", PARTICIPANTS) == ["Alice"]


class TestAbsentRule:
    @pytest.mark.parametrize(
        "text",
        [
            "Bob didnt join",
            "Bob didn't join",
            "bob did not participate",
            "Bob wasn't there",
            "Bob was not eating",
            "Bob isn't drinking",
            "bob isnt included",
        ],
    )
    def test_negated_verbs(self, text):
        assert extract_exclusions(text, PARTICIPANTS) == ["Bob"]

    def test_compound_subject_catches_nearest_name(self):
        """Only the name next to the verb is reliably captured."""
        excluded = extract_exclusions("Bob and Alice didn't join", PARTICIPANTS)

        assert "Alice" in excluded


class TestNegationRule:
    def test_no_name(self):
        assert extract_exclusions("drinks, no Carol", PARTICIPANTS) == ["Carol"]

    def test_not_name(self):
        assert extract_exclusions("not bob this time", PARTICIPANTS) == ["Bob"]

    def test_keyword_must_start_a_word(self):
        """The "no" inside "piano" is not a negation."""
        assert extract_exclusions("piano bar", ["Bar"]) == []


class TestResolution:
    def test_unknown_names_ignored(self):
        assert extract_exclusions("without Dave", PARTICIPANTS) == []

    def test_no_modifiers(self):
        assert extract_exclusions("Dinner at the Keg, $120", PARTICIPANTS) == []

    def test_empty_text(self):
        assert extract_exclusions("", PARTICIPANTS) == []

    def test_empty_roster(self):
        assert extract_exclusions("without Carol", []) == []

    def test_deduplicated(self):
        text = "without Bob, Bob didn't join, no bob"

        assert extract_exclusions(text, PARTICIPANTS) == ["Bob"]

    def test_rule_order_then_position(self):
        text = "Bob wasn't there, dinner without Carol"

        assert extract_exclusions(text, PARTICIPANTS) == ["Carol", "Bob"]

    def test_several_names(self):
        text = "without Alice, except Carol"

        assert extract_exclusions(text, PARTICIPANTS) == ["Alice", "Carol"]


class TestCustomRules:
    def test_alternate_rule_set(self):
        rules = [
            ExclusionRule(
                name="skip",
                pattern=re.compile(r"skip (\w+)"),
                resolve=lambda match: match.group(1),
            )
        ]

        assert extract_exclusions("skip carol, without bob", PARTICIPANTS, rules) == [
            "Carol"
        ]

    def test_default_rules_are_ordered(self):
        assert [rule.name for rule in EXCLUSION_RULES] == [
            "keyword",
            "absent",
            "negation",
        ]
