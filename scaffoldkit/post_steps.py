"""Best-effort post-generation steps.

Implements two independent phases that run after every file is written:

1. Dependency installation, per component, keyed by language family.
   Installation only runs when one of the family's manifests (from
   :data:`~scaffoldkit.languages.PROFILES`) is present.  Each family picks
   its tool through a fallback chain (first candidate found on PATH wins):

   - node:   pnpm -> yarn -> npm             (``package.json``)
   - rust:   cargo fetch                     (``Cargo.toml``)
   - python: poetry install                  (``pyproject.toml`` + poetry on PATH)
             else python3 -m venv .venv && .venv pip install -r requirements.txt
   - go:     go mod download                 (``go.mod``)

2. Version-control initialization: ``git init``, ``git add .``,
   ``git commit`` in that order; the first failure ends the phase.

Neither phase raises.  Every failure becomes a
:class:`~scaffoldkit.models.StepWarning` in the returned list.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .config import Config
from .errors import ExternalToolError
from .languages import PROFILES, LanguageFamily, language_family
from .models import Component, Stage, StepWarning
from .progress import ProgressReporter, stage_progress
from .utils import console as default_console
from .utils import run_command

WhichFn = Callable[[str], Optional[str]]

_PYTHON_CANDIDATES = ["python3", "python"]


class PostStepRunner:
    """Runs dependency installation and VCS initialization for a project.

    Args:
        config: Tool candidates, commit message and timeout.
        which: PATH lookup, ``shutil.which`` by default.  Injected so a caller
            can restrict or fake the available tools.
        console: Rich console for step output.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        which: WhichFn = shutil.which,
        console: Optional[Console] = None,
    ) -> None:
        self.config = config or Config()
        self.which = which
        self.console = console or default_console

    # -- Dependency installation -------------------------------------------

    async def install_dependencies(
        self,
        project_root: str | Path,
        components: Sequence[Component],
        reporter: Optional[ProgressReporter] = None,
    ) -> list[StepWarning]:
        """Install dependencies for every component, in order.

        Returns:
            One warning per component whose installation failed.
        """
        root = Path(project_root)
        warnings: list[StepWarning] = []
        total = len(components)

        for index, component in enumerate(components):
            label = component.name or component.id
            if reporter is not None:
                reporter.emit(
                    Stage.DEPENDENCIES,
                    stage_progress(Stage.DEPENDENCIES, index, total),
                    f"Installing dependencies for {label}...",
                )
            try:
                tool = await self.install_component(root / component.location, component)
            except (ExternalToolError, OSError) as exc:
                details = exc.details if isinstance(exc, ExternalToolError) else str(exc)
                warning = StepWarning(
                    stage=Stage.DEPENDENCIES,
                    message=f"Dependency installation failed for {label}",
                    details=details,
                )
                warnings.append(warning)
                if reporter is not None:
                    reporter.warn(warning)
                continue

            if tool is not None:
                self.console.print(
                    f"  [green]+[/green] {escape(label)}: dependencies installed with {tool}"
                )

        return warnings

    async def install_component(
        self, component_path: Path, component: Component
    ) -> Optional[str]:
        """Install one component's dependencies.

        Returns:
            The tool that ran, or ``None`` when there was nothing to do
            (unsupported language or no manifest).

        Raises:
            ExternalToolError: If no tool is available or the tool fails.
        """
        family = language_family(component.language)
        if family is None:
            return None
        manifests = [
            m for m in PROFILES[family].manifests if (component_path / m).exists()
        ]
        if not manifests:
            return None

        if family is LanguageFamily.NODE:
            return await self._install_node(component_path)
        if family is LanguageFamily.RUST:
            return await self._install_single(component_path, ["cargo", "fetch"])
        if family is LanguageFamily.PYTHON:
            return await self._install_python(component_path, manifests)
        return await self._install_single(component_path, ["go", "mod", "download"])

    async def _install_node(self, path: Path) -> str:
        candidates = self.config.node_package_managers
        tool = self.first_available(candidates)
        if tool is None:
            raise ExternalToolError(
                f"No JS/TS package manager found on PATH (tried {', '.join(candidates)})",
                command=" | ".join(f"{c} install" for c in candidates),
            )
        await self._run([tool, "install"], cwd=path)
        return tool

    async def _install_single(self, path: Path, cmd: list[str]) -> str:
        if self.which(cmd[0]) is None:
            raise ExternalToolError(
                f"{cmd[0]} not found on PATH", command=" ".join(cmd)
            )
        await self._run(cmd, cwd=path)
        return cmd[0]

    async def _install_python(self, path: Path, manifests: list[str]) -> str:
        has_pyproject = "pyproject.toml" in manifests
        has_requirements = "requirements.txt" in manifests

        if has_pyproject and self.which("poetry") is not None:
            await self._run(["poetry", "install"], cwd=path)
            return "poetry"

        if not has_requirements:
            raise ExternalToolError(
                "poetry not found on PATH and no requirements.txt to fall back to",
                command="poetry install",
            )

        python = self.first_available(_PYTHON_CANDIDATES)
        if python is None:
            raise ExternalToolError(
                "No Python interpreter found on PATH (tried python3, python)",
                command="python3 -m venv .venv",
            )
        await self._run([python, "-m", "venv", ".venv"], cwd=path)
        pip = _venv_executable(path / ".venv", "pip")
        await self._run([str(pip), "install", "-r", "requirements.txt"], cwd=path)
        return "pip"

    # -- Version control ---------------------------------------------------

    async def init_vcs(
        self,
        project_root: str | Path,
        reporter: Optional[ProgressReporter] = None,
    ) -> list[StepWarning]:
        """Initialize a git repository with one commit holding every file.

        Returns:
            An empty list when the repository was fully initialized,
            otherwise the single warning for the step that failed.
        """
        root = Path(project_root)
        git = self.config.git_binary
        steps = [
            ("Initializing Git repository...", ["init"]),
            ("Staging files...", ["add", "."]),
            ("Creating initial commit...", ["commit", "-m", self.config.commit_message]),
        ]

        if self.which(git) is None:
            return [self._vcs_warning(
                ExternalToolError(f"{git} not found on PATH", command=f"{git} init"),
                reporter,
            )]

        for index, (message, args) in enumerate(steps):
            if reporter is not None:
                reporter.emit(Stage.GIT, stage_progress(Stage.GIT, index, len(steps)), message)
            try:
                await self._run([git, *args], cwd=root)
            except ExternalToolError as exc:
                return [self._vcs_warning(exc, reporter)]

        self.console.print("  [green]+[/green] Git repository initialized")
        return []

    def _vcs_warning(
        self, exc: ExternalToolError, reporter: Optional[ProgressReporter]
    ) -> StepWarning:
        warning = StepWarning(
            stage=Stage.GIT,
            message=f"Git initialization failed: {exc}",
            details=exc.details,
        )
        if reporter is not None:
            reporter.warn(warning)
        return warning

    # -- Helpers -----------------------------------------------------------

    def first_available(self, candidates: Sequence[str]) -> Optional[str]:
        """Return the first candidate found on PATH, or ``None``."""
        for candidate in candidates:
            if self.which(candidate) is not None:
                return candidate
        return None

    async def _run(self, cmd: list[str], cwd: Path) -> str:
        """Run *cmd* in *cwd*, returning stdout.

        Raises:
            ExternalToolError: On spawn failure or a non-zero exit.
        """
        cmd_str = " ".join(cmd)
        try:
            exit_code, stdout, stderr = await run_command(
                cmd, cwd=cwd, timeout=self.config.tool_timeout
            )
        except OSError as exc:
            raise ExternalToolError(
                f"Failed to start {cmd[0]}: {exc}",
                command=cmd_str,
                stderr=str(exc),
            ) from exc

        if exit_code != 0:
            raise ExternalToolError(
                f"{cmd_str} exited with code {exit_code}",
                command=cmd_str,
                exit_code=exit_code,
                stderr=stderr or stdout,
            )
        return stdout


def _venv_executable(venv: Path, name: str) -> Path:
    if os.name == "nt":
        return venv / "Scripts" / f"{name}.exe"
    return venv / "bin" / name
