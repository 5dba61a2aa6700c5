"""scaffoldkit configuration.

Typed runtime settings for the generator and its post-steps.  Settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_NODE_MANAGERS: list[str] = ["pnpm", "yarn", "npm"]

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global scaffoldkit configuration.

    Instances are typically created once by the CLI entry point (or by the
    embedding application) and handed to
    :class:`~scaffoldkit.generator.ScaffoldGenerator`.
    """

    install_dependencies: bool = Field(
        default=True, description="Run per-component dependency installation after generation"
    )
    node_package_managers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NODE_MANAGERS),
        min_length=1,
        description="JS/TS package managers in fallback order (first found on PATH wins)",
    )
    commit_message: str = Field(default="Initial commit", min_length=1)
    license_holder: str = Field(default="", description="Copyright holder written to LICENSE")
    tool_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-command timeout in seconds; None waits for the tool to exit",
    )
    git_binary: str = Field(default="git")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            SCAFFOLD_INSTALL_DEPENDENCIES, SCAFFOLD_NODE_MANAGERS,
            SCAFFOLD_COMMIT_MESSAGE, SCAFFOLD_LICENSE_HOLDER,
            SCAFFOLD_TOOL_TIMEOUT, SCAFFOLD_GIT_BINARY.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SCAFFOLD_INSTALL_DEPENDENCIES"):
            kwargs["install_dependencies"] = (
                os.environ["SCAFFOLD_INSTALL_DEPENDENCIES"].strip().lower() in _TRUTHY
            )
        if os.environ.get("SCAFFOLD_NODE_MANAGERS"):
            managers = [
                m.strip() for m in os.environ["SCAFFOLD_NODE_MANAGERS"].split(",") if m.strip()
            ]
            if managers:
                kwargs["node_package_managers"] = managers
        if os.environ.get("SCAFFOLD_COMMIT_MESSAGE"):
            kwargs["commit_message"] = os.environ["SCAFFOLD_COMMIT_MESSAGE"]
        if os.environ.get("SCAFFOLD_LICENSE_HOLDER"):
            kwargs["license_holder"] = os.environ["SCAFFOLD_LICENSE_HOLDER"]
        if os.environ.get("SCAFFOLD_TOOL_TIMEOUT"):
            kwargs["tool_timeout"] = float(os.environ["SCAFFOLD_TOOL_TIMEOUT"])
        if os.environ.get("SCAFFOLD_GIT_BINARY"):
            kwargs["git_binary"] = os.environ["SCAFFOLD_GIT_BINARY"]
        return cls(**kwargs)
