"""scaffoldkit -- materializes projects from declarative scaffold specs.

Takes a ``ScaffoldSpec`` (usually loaded from JSON) describing one or more
components, each with its own tree of directories and files, and writes the
project to ``<projectPath>/<projectName>`` followed by best-effort dependency
installation and git initialization.

Quick usage::

    from scaffoldkit import ScaffoldGenerator, load_spec

    spec = load_spec("spec.json")
    result = await ScaffoldGenerator(subscriber=print).generate(spec)
"""

from .config import Config
from .errors import (
    ExternalToolError,
    GenerationError,
    ScaffoldIOError,
    SpecValidationError,
    TemplateError,
)
from .generator import GenerationState, ScaffoldGenerator
from .materializer import TreeMaterializer
from .models import (
    Component,
    DirectoryNode,
    FeatureFlags,
    FileNode,
    GenerationResult,
    ProgressEvent,
    ScaffoldSpec,
    ScaffoldTree,
    Stage,
    StepWarning,
    TemplateEngine,
    load_spec,
)
from .post_steps import PostStepRunner
from .progress import ProgressReporter
from .templates import TemplateRenderer

__version__ = "0.1.0"

__all__ = [
    # Engine
    "ScaffoldGenerator",
    "GenerationState",
    "TreeMaterializer",
    "TemplateRenderer",
    "PostStepRunner",
    "ProgressReporter",
    "Config",
    # Models
    "ScaffoldSpec",
    "Component",
    "ScaffoldTree",
    "DirectoryNode",
    "FileNode",
    "FeatureFlags",
    "TemplateEngine",
    "Stage",
    "ProgressEvent",
    "StepWarning",
    "GenerationResult",
    "load_spec",
    # Errors
    "GenerationError",
    "SpecValidationError",
    "ScaffoldIOError",
    "TemplateError",
    "ExternalToolError",
]
