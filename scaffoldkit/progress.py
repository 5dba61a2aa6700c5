"""Staged progress reporting for a generation run.

A :class:`ProgressReporter` delivers :class:`~scaffoldkit.models.ProgressEvent`
objects, in issuance order, to exactly one subscriber.  Percentages are
clamped into the range of their stage and never go backwards:

    preparing     0-5
    files         5-50   (component i of N starts at 5 + i*45/N)
    dependencies  50-90
    git           90-95
    complete      100
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from rich.console import Console
from rich.markup import escape

from .models import ProgressEvent, Stage, StepWarning
from .utils import console as default_console

Subscriber = Callable[[ProgressEvent], Any]

STAGE_RANGES: dict[Stage, tuple[int, int]] = {
    Stage.PREPARING: (0, 5),
    Stage.FILES: (5, 50),
    Stage.DEPENDENCIES: (50, 90),
    Stage.GIT: (90, 95),
    Stage.COMPLETE: (100, 100),
}

STAGE_COLORS: dict[Stage, str] = {
    Stage.PREPARING: "bright_cyan",
    Stage.FILES: "bright_green",
    Stage.DEPENDENCIES: "bright_yellow",
    Stage.GIT: "bright_magenta",
    Stage.COMPLETE: "bright_blue",
}


def stage_progress(stage: Stage, index: int, total: int) -> int:
    """Linear position of item *index* of *total* within *stage*'s range."""
    low, high = STAGE_RANGES[stage]
    if total <= 0:
        return low
    return low + (index * (high - low)) // total


class ProgressReporter:
    """Ordered, monotonic, fire-and-forget progress stream.

    Attributes:
        events: Every event emitted so far, in order.
        warnings: Every warning reported through :meth:`warn`.
    """

    def __init__(
        self,
        subscriber: Optional[Subscriber] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.subscriber = subscriber
        self.console = console or default_console
        self.events: list[ProgressEvent] = []
        self.warnings: list[StepWarning] = []
        self._last = 0

    @property
    def last_progress(self) -> int:
        return self._last

    def emit(
        self,
        stage: Stage,
        progress: int,
        message: str,
        details: Optional[str] = None,
    ) -> ProgressEvent:
        """Record an event and hand it to the subscriber.

        A subscriber that raises is reported on the console and otherwise
        ignored; the run goes on.
        """
        low, high = STAGE_RANGES[stage]
        value = max(min(max(progress, low), high), self._last)
        self._last = value

        event = ProgressEvent(stage=stage, progress=value, message=message, details=details)
        self.events.append(event)

        if self.subscriber is not None:
            try:
                self.subscriber(event)
            except Exception as exc:
                self.console.print(
                    f"[yellow]Progress subscriber failed:[/yellow] {escape(str(exc))}"
                )
        return event

    def warn(self, warning: StepWarning) -> ProgressEvent:
        """Emit a non-fatal warning at the current progress value."""
        self.warnings.append(warning)
        return self.emit(
            warning.stage,
            self._last,
            f"Warning: {warning.message}",
            details=warning.details or warning.message,
        )


def console_subscriber(out: Optional[Console] = None) -> Subscriber:
    """Build a subscriber that prints each event as one Rich line."""
    out = out or default_console

    def _print(event: ProgressEvent) -> None:
        color = STAGE_COLORS.get(event.stage, "white")
        out.print(
            f"[{color}]{event.progress:>3}%[/{color}] "
            f"[bold]{event.stage.value:<12}[/bold] {escape(event.message)}"
        )
        if event.details:
            out.print(f"      [dim]{escape(event.details)}[/dim]")

    return _print
