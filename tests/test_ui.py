"""Tests for the interactive note prompt helpers."""

from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from group_settle.ui import ParticipantCompleter, confirm_exclusions


def completions(completer: ParticipantCompleter, text: str) -> list[str]:
    document = Document(text, cursor_position=len(text))
    return [c.text for c in completer.get_completions(document, CompleteEvent())]


class TestParticipantCompleter:
    def setup_method(self):
        self.completer = ParticipantCompleter(["Alice", "Bob", "Carol"])

    def test_fuzzy_match(self):
        assert completions(self.completer, "without crl") == ["Carol"]

    def test_case_insensitive(self):
        assert completions(self.completer, "ALI") == ["Alice"]

    def test_empty_word_offers_everyone(self):
        assert completions(self.completer, "without ") == ["Alice", "Bob", "Carol"]

    def test_no_match(self):
        assert completions(self.completer, "xyz") == []


class TestConfirmExclusions:
    def test_default_is_yes(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda _: "")

        assert confirm_exclusions(["Bob"]) is True

    def test_no(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda _: "n")

        assert confirm_exclusions(["Bob"]) is False
