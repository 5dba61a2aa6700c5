"""Exception hierarchy for the scaffolding engine.

Only validation, I/O and template errors ever end a run.  External tool
failures are raised inside the post-step runner and converted there into
warnings, so callers of :class:`~scaffoldkit.generator.ScaffoldGenerator`
never see them.
"""

from __future__ import annotations

from pathlib import Path


class GenerationError(Exception):
    """Base class for every error raised by the engine."""


class SpecValidationError(GenerationError):
    """Raised when a spec is rejected before any filesystem mutation."""


class ScaffoldIOError(GenerationError):
    """Raised when a filesystem operation fails mid-run.

    Whatever was written before the failure stays on disk.
    """

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class TemplateError(ScaffoldIOError):
    """Raised when a templated payload cannot be rendered."""


class ExternalToolError(GenerationError):
    """Raised when an external command is missing or exits non-zero."""

    def __init__(
        self,
        message: str,
        command: str = "",
        exit_code: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)

    @property
    def details(self) -> str:
        """Warning detail string: ``{stderr, exitCode}`` flattened to text."""
        parts = []
        if self.command:
            parts.append(f"command: {self.command}")
        if self.exit_code is not None:
            parts.append(f"exit code: {self.exit_code}")
        if self.stderr:
            parts.append(f"stderr: {self.stderr}")
        return "\n".join(parts) or str(self)
