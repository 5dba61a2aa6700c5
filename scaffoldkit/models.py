"""Pydantic v2 models for scaffold specs, progress events and results.

The spec models mirror the JSON shape produced by the pattern catalog and the
UI (camelCase keys) while exposing snake_case attributes to Python code.
Input models are frozen: a spec is built once, before generation starts, and
never changes during a run.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .utils import load_json


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TemplateEngine(str, Enum):
    """How a file payload is turned into bytes on disk."""
    HANDLEBARS = "handlebars"
    NONE = "none"


class Stage(str, Enum):
    """Progress stages, in the order a run passes through them."""
    PREPARING = "preparing"
    FILES = "files"
    DEPENDENCIES = "dependencies"
    GIT = "git"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Spec tree
# ---------------------------------------------------------------------------

_SPEC_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


def _relative_path(value: str) -> str:
    """Reject absolute paths and ``..`` segments in tree paths."""
    if PurePosixPath(value).is_absolute() or PureWindowsPath(value).is_absolute():
        raise ValueError(f"path must be relative: {value!r}")
    if ".." in PurePosixPath(value.replace("\\", "/")).parts:
        raise ValueError(f"path must not leave its parent directory: {value!r}")
    return value


class FileNode(BaseModel):
    """A file to create, either rendered or copied verbatim."""
    model_config = _SPEC_CONFIG

    path: str = Field(..., min_length=1, description="Path relative to the parent directory")
    content: str = Field(default="", description="Textual payload")
    template_engine: TemplateEngine = Field(
        default=TemplateEngine.NONE, description="'handlebars' renders, 'none' copies"
    )
    overwritable: bool = Field(
        default=False, description="Whether an existing file at the target may be replaced"
    )

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        return _relative_path(value)

    @property
    def is_templated(self) -> bool:
        return self.template_engine is TemplateEngine.HANDLEBARS


class DirectoryNode(BaseModel):
    """A directory, with optional nested directories and files inside it."""
    model_config = _SPEC_CONFIG

    path: str = Field(..., min_length=1)
    description: Optional[str] = None
    subdirectories: list[DirectoryNode] = Field(default_factory=list)
    files: list[FileNode] = Field(default_factory=list)

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        return _relative_path(value)

    @field_validator("subdirectories", "files", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ScaffoldTree(BaseModel):
    """Top-level directories and files of one component."""
    model_config = _SPEC_CONFIG

    directories: list[DirectoryNode] = Field(default_factory=list)
    files: list[FileNode] = Field(default_factory=list)


class Component(BaseModel):
    """One generatable unit of a project (a backend service, a frontend, ...)."""
    model_config = _SPEC_CONFIG

    id: str
    role: str = Field(default="", description="e.g. 'backend', 'frontend', 'database'")
    name: str = ""
    language: str = ""
    framework: str = ""
    location: str = Field(default=".", description="Path relative to the project root")
    scaffolding: ScaffoldTree = Field(default_factory=ScaffoldTree)
    custom_config: Optional[dict[str, Any]] = Field(
        default=None, description="Opaque, passed through untouched"
    )

    @field_validator("location")
    @classmethod
    def _check_location(cls, value: str) -> str:
        return _relative_path(value or ".")


class FeatureFlags(BaseModel):
    """Optional project features; template inputs and post-step gates."""
    model_config = _SPEC_CONFIG

    testing: bool = False
    linting: bool = False
    git: bool = False
    docker: bool = False
    ci: bool = False


class ScaffoldSpec(BaseModel):
    """Full declarative description of a project to generate.

    Emptiness of ``project_name`` and ``components`` is deliberately not
    validated here; :class:`~scaffoldkit.generator.ScaffoldGenerator` rejects
    such specs so that the rejection is reported as a result.
    """
    model_config = _SPEC_CONFIG

    pattern_id: str = ""
    pattern_name: str = ""
    project_name: str = ""
    project_description: str = ""
    project_path: str = "."
    components: list[Component] = Field(default_factory=list)
    features: FeatureFlags = Field(default_factory=FeatureFlags)

    @property
    def target_dir(self) -> Path:
        """``<project_path>/<project_name>``."""
        return Path(self.project_path) / self.project_name

    @property
    def has_database(self) -> bool:
        return any(c.role == "database" for c in self.components)


def load_spec(path: str | Path) -> ScaffoldSpec:
    """Load and validate a JSON spec file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        pydantic.ValidationError: If the payload does not match the schema.
    """
    return ScaffoldSpec.model_validate(load_json(path))


# ---------------------------------------------------------------------------
# Run output
# ---------------------------------------------------------------------------

_OUTPUT_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProgressEvent(BaseModel):
    """A staged, percentage-tagged status message."""
    model_config = _OUTPUT_CONFIG

    stage: Stage
    progress: int = Field(..., ge=0, le=100)
    message: str
    details: Optional[str] = None


class StepWarning(BaseModel):
    """Record of a best-effort step that failed without failing the run."""
    model_config = _OUTPUT_CONFIG

    stage: Stage
    message: str
    details: Optional[str] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class GenerationResult(BaseModel):
    """Terminal outcome of a run, produced exactly once."""
    model_config = _OUTPUT_CONFIG

    success: bool
    project_path: str
    message: str
    files_created: int = 0
    components_generated: list[str] = Field(default_factory=list)
    warnings: list[StepWarning] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
