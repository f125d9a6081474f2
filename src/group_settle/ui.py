"""Interactive prompts for entering split notes."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .exclusions import extract_exclusions

logger = logging.getLogger(__name__)


class ParticipantCompleter(Completer):
    """Fuzzy completer for participant names in the word under the cursor."""

    def __init__(self, participants: list[str]):
        """Initialize the completer with the roster."""
        self.participants = participants

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions for the current word."""
        word = document.get_word_before_cursor()
        query = word.lower()

        for name in self.participants:
            if not query or self._fuzzy_match(query, name.lower()):
                yield Completion(
                    text=name,
                    start_position=-len(word),
                    display=name,
                )

    def _fuzzy_match(self, query: str, text: str) -> bool:
        """
        Fuzzy match: all characters in query must appear in order in text.

        Example:
            query="crl" matches "Carol"
        """
        query_idx = 0
        for char in text:
            if query_idx < len(query) and char == query[query_idx]:
                query_idx += 1
        return query_idx == len(query)


def prompt_split_note(participants: list[str]) -> list[str]:
    """
    Ask for a free-form split note and return who it excludes.

    The user is shown who would be excluded and asked to confirm; on a "no"
    they can re-enter the note.

    Args:
        participants: The roster, used for completion and matching

    Returns:
        Names to exclude (empty when the note is skipped)
    """
    print("\n📝 Anyone left out? e.g. \"without Carol\" or \"Bob didn't join\"")
    print("   Tab completes names, Enter on an empty line splits with everyone\n")

    session: PromptSession[str] = PromptSession(
        completer=ParticipantCompleter(participants)
    )

    try:
        while True:
            note = session.prompt("Note: ", complete_while_typing=True)
            if not note:
                return []

            excluded = extract_exclusions(note, participants)
            if not excluded:
                print("   (no participants recognised, splitting with everyone)")
                return []

            if confirm_exclusions(excluded):
                logger.info(f"User excluded {excluded}")
                return excluded

    except KeyboardInterrupt:
        print("\n⏭️  Skipped")
        return []
    except EOFError:
        return []


def confirm_exclusions(excluded: list[str]) -> bool:
    """
    Simple yes/no confirmation for an exclusion list.

    Returns:
        True if confirmed, False otherwise
    """
    print(f"   → leaving out: {', '.join(excluded)}")
    response = input("   Confirm? [Y/n] ").strip().lower()
    return response in ("", "y", "yes")
