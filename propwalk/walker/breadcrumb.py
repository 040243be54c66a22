from contextlib import contextmanager
from typing import Callable, List, Optional

DEFAULT_SEPARATOR = " » "


class BreadcrumbTracker:
    """
    Path of display labels from the schema root to the current traversal position.

    One tracker belongs to one walk and is threaded through every frame. Frames
    push labels when they enter a nested level and pop them on the way out. The
    trail is shown only below the root level, and shown once more ("Back to")
    the first time a frame continues after a nested level has closed.

    Args:
        display (Callable[[str], None], optional): Receives each rendered line.
        separator (str): Joins the labels when rendering.
    """

    def __init__(self, display: Optional[Callable[[str], None]] = None, separator: str = DEFAULT_SEPARATOR):
        self._stack: List[str] = []
        self._display = display
        self.separator = separator
        self._left_nesting = False

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def path(self) -> List[str]:
        return list(self._stack)

    def push(self, *labels: str) -> None:
        self._stack.extend(str(label) for label in labels)

    def pop(self, count: int = 1) -> None:
        if count > len(self._stack):
            raise IndexError(f"Cannot pop {count} labels from a breadcrumb of depth {len(self._stack)}")
        for _ in range(count):
            self._stack.pop()
        self._left_nesting = True

    @contextmanager
    def nested(self, *labels: str):
        self.push(*labels)
        try:
            yield self
        finally:
            self.pop(len(labels))

    def format(self, prefix: str = "Current item") -> str:
        return f"{prefix}: {self.separator.join(self._stack)}"

    def render(self, prefix: str = "Current item") -> Optional[str]:
        """
        Show the trail, unless we are at the root level.

        Returns:
            str | None: The rendered line, or None when nothing was shown.
        """
        if self.depth <= 1:
            return None
        line = self.format(prefix)
        if self._display is not None:
            self._display(line)
        return line

    def reorient(self) -> Optional[str]:
        """Render a "Back to" line if a nested level closed since the last call."""
        if not self._left_nesting:
            return None
        self._left_nesting = False
        return self.render(prefix="Back to")

    def enter_level(self) -> Optional[str]:
        self._left_nesting = False
        return self.render()
