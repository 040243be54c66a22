from collections import deque
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger as log

from propwalk.util.fileio import FileIO
from propwalk.walker.errors import AbortedSession, AdapterValidationError
from propwalk.walker.prompt import NONE_OPTION, OptionsProvider, PromptAdapter, is_none_choice

# Scripted answer meaning "press enter": take the question's default.
DEFAULT = object()


class ScriptedPromptAdapter(PromptAdapter):
    """
    Answers questions from a fixed script, in order.

    Used by tests and for replaying a session from an answers file. Answers are
    validated like typed input: an answer that does not fit is logged, dropped and
    the next scripted answer is tried for the same question. Running out of answers
    ends the session.

    Args:
        answers (Iterable): One entry per question. Use DEFAULT (or None for text
            questions) to accept the question's default.
    """

    def __init__(self, answers: Iterable[Any] = ()):
        self._answers = deque(answers)
        self.calls: List[Tuple[str, str]] = []
        self.messages: List[str] = []

    @staticmethod
    def from_file(path: Path) -> "ScriptedPromptAdapter":
        """
        Build an adapter from a YAML, JSON or TOML answers file.

        The file is either a plain list of answers or a mapping with an "answers" list.
        """
        data = FileIO.read(Path(path))
        if isinstance(data, dict):
            data = data.get("answers", [])
        if not isinstance(data, list):
            raise TypeError(f"[ScriptedPromptAdapter] Answers in {path} must be a list, got {type(data).__name__}")
        log.debug("[ScriptedPromptAdapter] Loaded {} answers from {}", len(data), path)
        return ScriptedPromptAdapter(data)

    @property
    def remaining(self) -> int:
        return len(self._answers)

    def methods(self) -> List[str]:
        return [method for method, _ in self.calls]

    def labels(self, method: Optional[str] = None) -> List[str]:
        return [label for m, label in self.calls if method is None or m == method]

    # ─── Answer handling ───────────────────────────────────────────────────────

    def _ask(self, method: str, label: str, validate):
        self.calls.append((method, label))
        while True:
            if not self._answers:
                raise AbortedSession(f"Scripted answers ran out at {method}: {label!r}")
            answer = self._answers.popleft()
            try:
                return validate(answer)
            except AdapterValidationError as e:
                log.warning("[ScriptedPromptAdapter] Rejected answer {!r} for {!r}: {}", answer, label, e)

    @staticmethod
    def _check_key(answer: Any, keys: Iterable[str]) -> str:
        lookup = {str(k).lower(): k for k in keys}
        key = lookup.get(str(answer).lower())
        if key is None:
            raise AdapterValidationError(f"Value {answer!r} is invalid.")
        return key

    @staticmethod
    def _check_count(values: Sequence[Any], limit: Optional[int], required: bool) -> None:
        if required and not values:
            raise AdapterValidationError("At least one value is required.")
        if limit is not None and len(values) > limit:
            raise AdapterValidationError(f"At most {limit} values may be given.")

    @staticmethod
    def _as_list(answer: Any) -> List[Any]:
        if answer is None or answer is DEFAULT:
            return []
        if isinstance(answer, (list, tuple, set)):
            return list(answer)
        return [answer]

    # ─── PromptAdapter ─────────────────────────────────────────────────────────

    def confirm(self, label: str, default: bool = False) -> bool:
        def validate(answer):
            if answer is DEFAULT or answer is None:
                return default
            if isinstance(answer, bool):
                return answer
            text = str(answer).strip().lower()
            if text in ("y", "yes", "true", "1"):
                return True
            if text in ("n", "no", "false", "0"):
                return False
            raise AdapterValidationError(f"{answer!r} is not a yes/no answer.")

        return self._ask("confirm", label, validate)

    def select_one(self, label: str, options: Dict[str, str], default: Optional[str] = None,
                   extra: Optional[Dict[str, str]] = None) -> Optional[str]:
        keys = list(options) + list(extra or {})

        def validate(answer):
            if answer is DEFAULT or (answer is None and default is not None):
                answer = default
            if is_none_choice(answer) and NONE_OPTION in options:
                return None
            if answer is None:
                raise AdapterValidationError("An option must be chosen.")
            return self._check_key(answer, keys)

        return self._ask("select_one", label, validate)

    def select_many(self, label: str, options: Dict[str, str], default: Sequence[str] = (),
                    extra: Optional[Dict[str, str]] = None, limit: Optional[int] = None,
                    required: bool = False) -> List[str]:
        keys = list(options) + list(extra or {})

        def validate(answer):
            chosen = list(default) if answer is DEFAULT else self._as_list(answer)
            picked = {self._check_key(item, keys) for item in chosen}
            self._check_count(picked, limit, required)
            return [key for key in keys if key in picked]

        return self._ask("select_many", label, validate)

    def text(self, label: str, default: str = "", required: bool = False) -> str:
        def validate(answer):
            value = (default if answer is DEFAULT or answer is None else str(answer)).strip()
            if required and not value:
                raise AdapterValidationError("A value is required.")
            return value

        return self._ask("text", label, validate)

    def text_list(self, label: str, default: Sequence[str] = (), limit: Optional[int] = None,
                  required: bool = False) -> List[str]:
        def validate(answer):
            lines = list(default) if answer is DEFAULT else [str(item) for item in self._as_list(answer)]
            lines = [line for line in lines if line]
            self._check_count(lines, limit, required)
            return lines

        return self._ask("text_list", label, validate)

    def search_one(self, label: str, provider: OptionsProvider, required: bool = False) -> Optional[str]:
        def validate(answer):
            if is_none_choice(answer) or answer is DEFAULT:
                if required:
                    raise AdapterValidationError("An option must be chosen.")
                return None
            return self._check_key(answer, provider(str(answer)))

        return self._ask("search_one", label, validate)

    def search_many(self, label: str, provider: OptionsProvider, limit: Optional[int] = None,
                    required: bool = False) -> List[str]:
        def validate(answer):
            picked = []
            for item in self._as_list(answer):
                key = self._check_key(item, provider(str(item)))
                if key not in picked:
                    picked.append(key)
            self._check_count(picked, limit, required)
            return picked

        return self._ask("search_many", label, validate)

    def message(self, text: str) -> None:
        self.messages.append(text)
