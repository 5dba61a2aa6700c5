"""Main scaffolding orchestrator.

Takes a :class:`~scaffoldkit.models.ScaffoldSpec` and generates the project
at ``<projectPath>/<projectName>``:

1. Validate the spec (no filesystem side effects before this passes).
2. Create the project root.
3. Materialize every component's tree, strictly in input order.
4. Write README.md, .gitignore and LICENSE.
5. Run the best-effort post-steps (dependency install, git init).

Steps 2-4 abort the run on the first I/O or template error, leaving whatever
was written on disk.  Step 5 never fails the run; its problems are reported as
warnings.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from rich.console import Console

from .config import Config
from .errors import ScaffoldIOError, SpecValidationError
from .materializer import TreeMaterializer, ensure_directory
from .models import GenerationResult, ScaffoldSpec, Stage, StepWarning
from .post_steps import PostStepRunner
from .progress import ProgressReporter, Subscriber, stage_progress
from .root_files import RootFileWriter
from .templates import TemplateRenderer
from .utils import console as default_console


class GenerationState(str, Enum):
    """Where a :class:`ScaffoldGenerator` is in its run."""

    IDLE = "idle"
    VALIDATING = "validating"
    CREATING_ROOT = "creating_root"
    GENERATING_COMPONENTS = "generating_components"
    GENERATING_ROOT_FILES = "generating_root_files"
    RUNNING_POST_STEPS = "running_post_steps"
    DONE = "done"
    REJECTED = "rejected"
    ABORTED = "aborted"


# ---------------------------------------------------------------------------
# Validation & context
# ---------------------------------------------------------------------------


def validate_spec(spec: ScaffoldSpec) -> None:
    """Reject specs that must not touch the filesystem.

    Raises:
        SpecValidationError: Empty or path-like project name, no components,
            or a target directory that already exists or cannot be checked.
    """
    name = spec.project_name.strip()
    if not name:
        raise SpecValidationError("Project name is required")
    if name in (".", "..") or "/" in name or "\\" in name:
        raise SpecValidationError(
            f"Project name '{spec.project_name}' must be a single directory name"
        )
    if not spec.components:
        raise SpecValidationError("At least one component is required")
    try:
        exists = spec.target_dir.exists()
    except OSError as exc:
        raise SpecValidationError(
            f"Cannot use project directory {spec.target_dir}: {exc}"
        ) from exc
    if exists:
        raise SpecValidationError(
            f"Directory '{spec.project_name}' already exists at {spec.target_dir}"
        )


def build_template_context(spec: ScaffoldSpec) -> dict[str, Any]:
    """Build the flat template context shared by every payload of a run."""
    return {
        "projectName": spec.project_name,
        "projectDescription": spec.project_description,
        "patternName": spec.pattern_name,
        "patternId": spec.pattern_id,
        "includeTests": spec.features.testing,
        "includeLinting": spec.features.linting,
        "includeGit": spec.features.git,
        "includeDocker": spec.features.docker,
        "includeCi": spec.features.ci,
        "includeDatabase": spec.has_database,
    }


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ScaffoldGenerator:
    """Runs one generation at a time and reports progress to one subscriber.

    Attributes:
        state: Current :class:`GenerationState`.
        reporter: The progress reporter of the latest run.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        subscriber: Optional[Subscriber] = None,
        *,
        renderer: Optional[TemplateRenderer] = None,
        post_steps: Optional[PostStepRunner] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.config = config or Config()
        self.subscriber = subscriber
        self.console = console or default_console
        self.renderer = renderer or TemplateRenderer()
        self.materializer = TreeMaterializer(self.renderer, console=self.console)
        self.root_files = RootFileWriter(self.renderer, self.config)
        self.post_steps = post_steps or PostStepRunner(self.config, console=self.console)
        self.state = GenerationState.IDLE
        self.reporter = ProgressReporter(subscriber, console=self.console)

    # -- Public API --------------------------------------------------------

    async def generate(self, spec: ScaffoldSpec) -> GenerationResult:
        """Generate the project described by *spec*.

        Returns:
            The terminal result.  ``success`` is ``False`` for a rejected spec
            and for a run aborted by an I/O or template error.
        """
        self.reporter = reporter = ProgressReporter(self.subscriber, console=self.console)
        project_root = spec.target_dir
        files_created = 0
        generated: list[str] = []

        # 1. Validate
        self.state = GenerationState.VALIDATING
        reporter.emit(
            Stage.PREPARING,
            0,
            f"Validating configuration for {spec.project_name or '(unnamed project)'}...",
        )
        try:
            validate_spec(spec)
        except SpecValidationError as exc:
            self.state = GenerationState.REJECTED
            return self._failure(project_root, str(exc))

        context = build_template_context(spec)
        total = len(spec.components)

        try:
            # 2. Project root
            self.state = GenerationState.CREATING_ROOT
            reporter.emit(Stage.PREPARING, 2, "Creating project directory...", str(project_root))
            await _create_root(project_root)

            # 3. Components
            self.state = GenerationState.GENERATING_COMPONENTS
            for index, component in enumerate(spec.components):
                label = component.name or component.id
                reporter.emit(
                    Stage.FILES,
                    stage_progress(Stage.FILES, index, total),
                    f"Generating component {label} ({index + 1}/{total})...",
                    f"{component.language}/{component.framework} -> {component.location}",
                )
                component_root = project_root / component.location
                await ensure_directory(component_root)
                files_created += await self.materializer.materialize(
                    component_root, component.scaffolding, context
                )
                generated.append(component.id)

            # 4. Root files
            self.state = GenerationState.GENERATING_ROOT_FILES
            reporter.emit(
                Stage.FILES, 50, "Generating root files...", "README.md, .gitignore, LICENSE"
            )
            files_created += await self.root_files.write(project_root, spec, context)
        except ScaffoldIOError as exc:
            self.state = GenerationState.ABORTED
            return self._failure(
                project_root, f"Generation failed: {exc}", files_created, generated
            )

        # 5. Post-steps
        self.state = GenerationState.RUNNING_POST_STEPS
        warnings: list[StepWarning] = []

        if self.config.install_dependencies:
            reporter.emit(Stage.DEPENDENCIES, 50, "Installing dependencies...")
            warnings += await self.post_steps.install_dependencies(
                project_root, spec.components, reporter
            )
        else:
            reporter.emit(
                Stage.DEPENDENCIES, 50, "Skipping dependency installation",
                "Disabled in configuration",
            )

        if spec.features.git:
            vcs_warnings = await self.post_steps.init_vcs(project_root, reporter)
            if not vcs_warnings:
                files_created += 1  # .git
            warnings += vcs_warnings

        # 6. Done
        self.state = GenerationState.DONE
        message = (
            f"Project '{spec.project_name}' generated successfully "
            f"with {len(generated)} components!"
        )
        if warnings:
            message += f" ({len(warnings)} warning(s))"
        reporter.emit(Stage.COMPLETE, 100, message)

        return GenerationResult(
            success=True,
            project_path=str(project_root),
            message=message,
            files_created=files_created,
            components_generated=generated,
            warnings=warnings,
        )

    async def generate_from_dict(self, payload: dict[str, Any]) -> GenerationResult:
        """Validate a JSON-shaped payload, then :meth:`generate` it.

        A payload that does not match the schema is rejected like any other
        invalid spec.
        """
        try:
            spec = ScaffoldSpec.model_validate(payload)
        except ValidationError as exc:
            self.state = GenerationState.REJECTED
            target = Path(str(payload.get("projectPath", "."))) / str(
                payload.get("projectName", "")
            )
            return self._failure(
                target, f"Invalid scaffold spec: {exc.error_count()} error(s)\n{exc}"
            )
        return await self.generate(spec)

    # -- Helpers -----------------------------------------------------------

    def _failure(
        self,
        project_root: Path,
        message: str,
        files_created: int = 0,
        generated: Optional[list[str]] = None,
    ) -> GenerationResult:
        return GenerationResult(
            success=False,
            project_path=str(project_root),
            message=message,
            files_created=files_created,
            components_generated=generated or [],
        )


async def _create_root(path: Path) -> None:
    try:
        await asyncio.to_thread(path.mkdir, parents=True, exist_ok=False)
    except OSError as exc:
        raise ScaffoldIOError(
            f"Failed to create project directory {path}: {exc}", path=path
        ) from exc
