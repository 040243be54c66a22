"""
Prompt contract between the traversal engine and a human interaction surface.

The engine never talks to a terminal directly. Every question it needs is one
method on a PromptAdapter; concrete adapters decide how to ask it. Adapters own
input validation: an answer that does not fit the question is rejected and the
same question is asked again, so the engine only ever sees valid answers.
Cancelling the session must surface as AbortedSession.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Sequence

# Option key injected in front of the options of an optional single choice.
# Picking it means "no value"; it is never stored.
NONE_OPTION = "none"
NONE_LABEL = "None"

OptionsProvider = Callable[[str], Dict[str, str]]


def with_none_option(options: Dict[str, str]) -> Dict[str, str]:
    merged = {NONE_OPTION: NONE_LABEL}
    merged.update(options)
    return merged


def is_none_choice(key: Optional[str]) -> bool:
    return key is None or key == NONE_OPTION or key == ""


class PromptAdapter(ABC):
    """
    Abstract interaction surface.

    All calls are synchronous and block until answered. No two calls are ever in
    flight at the same time.
    """

    @abstractmethod
    def confirm(self, label: str, default: bool = False) -> bool:
        """Ask a yes/no question."""

    @abstractmethod
    def select_one(self, label: str, options: Dict[str, str], default: Optional[str] = None,
                   extra: Optional[Dict[str, str]] = None) -> Optional[str]:
        """
        Pick one key from a listed option set.

        Args:
            label (str): Question text.
            options (dict): Listed options, key -> label, in display order.
            default (str, optional): Key chosen on an empty answer.
            extra (dict, optional): Further keys accepted when typed but not listed.

        Returns:
            str | None: The chosen key. NONE_OPTION or None when nothing was chosen.
        """

    @abstractmethod
    def select_many(self, label: str, options: Dict[str, str], default: Sequence[str] = (),
                    extra: Optional[Dict[str, str]] = None, limit: Optional[int] = None,
                    required: bool = False) -> List[str]:
        """
        Pick any number of keys from a listed option set.

        Returns:
            list[str]: Chosen keys in option order, without duplicates. Never
                empty when `required` is set.
        """

    @abstractmethod
    def text(self, label: str, default: str = "", required: bool = False) -> str:
        """Ask for one line of free text, stripped. Blank is allowed only when not required."""

    @abstractmethod
    def text_list(self, label: str, default: Sequence[str] = (), limit: Optional[int] = None,
                  required: bool = False) -> List[str]:
        """
        Ask for lines of free text, one per prompt, until an empty line. An empty
        line always ends the list; `default` lines are offered, never pre-filled.

        Returns:
            list[str]: The entered lines. Empty when the first line is empty,
                which is refused when `required` is set.
        """

    @abstractmethod
    def search_one(self, label: str, provider: OptionsProvider, required: bool = False) -> Optional[str]:
        """
        Pick one key from an option set too large to list, filtered by a query.

        Args:
            label (str): Question text.
            provider (Callable[[str], dict]): Maps a query to the matching options.
            required (bool): Whether "nothing" is an acceptable answer.

        Returns:
            str | None: The chosen key, or None/NONE_OPTION for nothing.
        """

    @abstractmethod
    def search_many(self, label: str, provider: OptionsProvider, limit: Optional[int] = None,
                    required: bool = False) -> List[str]:
        """Pick any number of keys from a large option set, one search at a time. At least one if `required`."""

    @abstractmethod
    def message(self, text: str) -> None:
        """Show a line of information. Not a question."""
