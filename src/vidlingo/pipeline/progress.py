"""Per-stage progress tracking."""

from collections.abc import Callable


class StageProgress:
    """Tracks progress of the current stage as a percentage in [0, 100].

    Measured progress never moves backwards within a stage. While work with
    no completion signal is outstanding (a network call) the tracker reports
    ``indeterminate`` instead of a made-up percentage.
    """

    def __init__(self, callback: Callable[[float, bool], None] | None = None):
        self.callback = callback
        self.value = 0.0
        self.indeterminate = False

    def reset(self) -> None:
        self.value = 0.0
        self.indeterminate = False

    def advance(self, percent: float) -> float:
        """Move measured progress forward to ``percent``."""
        self.value = max(self.value, min(100.0, max(0.0, percent)))
        self.indeterminate = False
        self._notify()
        return self.value

    def mark_indeterminate(self) -> None:
        self.indeterminate = True
        self._notify()

    def complete(self) -> float:
        return self.advance(100.0)

    def _notify(self) -> None:
        if self.callback:
            self.callback(self.value, self.indeterminate)
