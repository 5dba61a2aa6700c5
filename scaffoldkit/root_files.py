"""Project-level files written once every component is in place.

Renders ``README.md``, ``.gitignore`` and ``LICENSE`` from the packaged
templates.  The README and ignore file are assembled from each component's
language profile (see :mod:`scaffoldkit.languages`).
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from .config import Config
from .errors import ScaffoldIOError
from .languages import profile_for
from .models import ScaffoldSpec
from .templates import TemplateRenderer

ROOT_FILES: list[tuple[str, str]] = [
    ("README.md.j2", "README.md"),
    ("gitignore.j2", ".gitignore"),
    ("LICENSE.j2", "LICENSE"),
]


class RootFileWriter:
    """Writes the fixed set of root-level files for a project."""

    def __init__(self, renderer: TemplateRenderer, config: Optional[Config] = None) -> None:
        self.renderer = renderer
        self.config = config or Config()

    async def write(
        self, project_root: str | Path, spec: ScaffoldSpec, context: dict[str, Any]
    ) -> int:
        """Render every root file into *project_root*.

        Returns:
            Number of files written (always ``len(ROOT_FILES)``).

        Raises:
            ScaffoldIOError: If a file cannot be written.
            TemplateError: If a root template fails to render.
        """
        root = Path(project_root)
        root_ctx = {**context, **self.build_context(spec)}
        written = 0
        for template_name, output_name in ROOT_FILES:
            target = root / output_name
            try:
                await self.renderer.render_to_file(template_name, target, root_ctx)
            except OSError as exc:
                raise ScaffoldIOError(
                    f"Failed to create {output_name}: {exc}", path=target
                ) from exc
            written += 1
        return written

    def build_context(self, spec: ScaffoldSpec) -> dict[str, Any]:
        """Extra template variables for the root files."""
        components: list[dict[str, Any]] = []
        prerequisites: list[str] = []

        for component in spec.components:
            profile = profile_for(component.language)
            location = component.location or "."
            prefix = "" if location in (".", "./") else location.rstrip("/") + "/"
            entry: dict[str, Any] = {
                "name": component.name or component.id,
                "language": component.language,
                "framework": component.framework,
                "location": location,
                "install_steps": [],
                "dev_command": "",
                "ignore_entries": [],
            }
            if profile is not None:
                entry["install_steps"] = list(profile.install_steps)
                entry["dev_command"] = profile.dev_command
                entry["ignore_entries"] = [f"{prefix}{e}" for e in profile.ignore_entries]
                if profile.prerequisite not in prerequisites:
                    prerequisites.append(profile.prerequisite)
            components.append(entry)

        return {
            "components": components,
            "prerequisites": prerequisites,
            "year": datetime.now(timezone.utc).year,
            "license_holder": self.config.license_holder,
        }
