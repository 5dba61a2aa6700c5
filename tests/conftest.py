"""Shared pytest fixtures for the scaffoldkit test suite.

Provides reusable fixtures for:
- Scaffold spec factories (components, trees, files)
- A quiet Rich console that captures engine output
- A progress-event recorder
- Mock subprocess helpers and fake PATH lookups
- A generator wired to all of the above
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from scaffoldkit.config import Config
from scaffoldkit.generator import ScaffoldGenerator
from scaffoldkit.models import (
    Component,
    DirectoryNode,
    FeatureFlags,
    FileNode,
    ProgressEvent,
    ScaffoldSpec,
    ScaffoldTree,
    TemplateEngine,
)
from scaffoldkit.post_steps import PostStepRunner


# ---------------------------------------------------------------------------
# Console & progress
# ---------------------------------------------------------------------------

@pytest.fixture
def quiet_console() -> Console:
    """Rich console writing to an in-memory buffer (read via ``.file.getvalue()``)."""
    return Console(file=io.StringIO(), width=120, color_system=None)


class EventRecorder:
    """Progress subscriber that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def __call__(self, event: ProgressEvent) -> None:
        self.events.append(event)

    @property
    def progress_values(self) -> list[int]:
        return [e.progress for e in self.events]

    @property
    def details(self) -> list[str]:
        return [e.details for e in self.events if e.details]


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


# ---------------------------------------------------------------------------
# PATH lookups & subprocesses
# ---------------------------------------------------------------------------

def make_which(*available: str) -> Callable[[str], Optional[str]]:
    """Fake ``shutil.which`` that only finds the given tool names."""
    found = set(available)

    def _which(name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in found else None

    return _which


@pytest.fixture
def no_tools() -> Callable[[str], Optional[str]]:
    """PATH lookup that finds nothing."""
    return make_which()


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# Spec factories
# ---------------------------------------------------------------------------

def literal_file(path: str, content: str = "", overwritable: bool = True) -> FileNode:
    return FileNode(
        path=path,
        content=content,
        template_engine=TemplateEngine.NONE,
        overwritable=overwritable,
    )


def make_component(
    id: str = "app",
    *,
    role: str = "backend",
    language: str = "node-like",
    location: str = "app",
    directories: Optional[list[DirectoryNode]] = None,
    files: Optional[list[FileNode]] = None,
) -> Component:
    return Component(
        id=id,
        role=role,
        name=id.title(),
        language=language,
        framework="none",
        location=location,
        scaffolding=ScaffoldTree(
            directories=directories or [],
            files=files or [],
        ),
    )


def make_spec(
    project_path: Path,
    components: Optional[list[Component]] = None,
    *,
    name: str = "demo-project",
    git: bool = False,
    **kwargs: Any,
) -> ScaffoldSpec:
    return ScaffoldSpec(
        pattern_id="fullstack-web",
        pattern_name="Full-Stack Web",
        project_name=name,
        project_description="A generated test project.",
        project_path=str(project_path),
        components=components if components is not None else [make_component()],
        features=FeatureFlags(git=git, **kwargs),
    )


@pytest.fixture
def web_spec(tmp_path: Path) -> ScaffoldSpec:
    """One node-like component with ``src/`` and a literal ``src/index.txt``."""
    component = make_component(
        "web",
        location="web",
        directories=[DirectoryNode(path="src")],
        files=[literal_file("src/index.txt", "hi", overwritable=True)],
    )
    return make_spec(tmp_path, [component])


@pytest.fixture
def sample_spec_payload() -> dict[str, Any]:
    """JSON-shaped spec as produced by the pattern catalog (camelCase keys)."""
    return {
        "patternId": "rest-api-backend",
        "patternName": "REST API Backend",
        "projectName": "orders-api",
        "projectDescription": "Order management service",
        "projectPath": ".",
        "components": [
            {
                "id": "api",
                "role": "backend",
                "name": "API Server",
                "language": "python",
                "framework": "fastapi",
                "location": "api",
                "scaffolding": {
                    "directories": [
                        {
                            "path": "app",
                            "description": "Application package",
                            "subdirectories": [{"path": "routers"}],
                            "files": [
                                {
                                    "path": "__init__.py",
                                    "content": "",
                                    "templateEngine": "none",
                                    "overwritable": False,
                                }
                            ],
                        }
                    ],
                    "files": [
                        {
                            "path": "app/main.py",
                            "content": '"""{{projectName}} API."""\n',
                            "templateEngine": "handlebars",
                            "overwritable": True,
                        }
                    ],
                },
                "customConfig": {"port": 8000},
            },
            {
                "id": "db",
                "role": "database",
                "name": "Database",
                "language": "sql",
                "framework": "postgres",
                "location": "db",
                "scaffolding": {"directories": [], "files": []},
            },
        ],
        "features": {
            "testing": True,
            "linting": False,
            "git": False,
            "docker": True,
            "ci": False,
        },
    }


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

@pytest.fixture
def make_generator(quiet_console: Console, no_tools):
    """Factory for a ScaffoldGenerator with a quiet console and no tools on PATH."""
    def factory(
        subscriber=None,
        config: Optional[Config] = None,
        which=None,
    ) -> ScaffoldGenerator:
        config = config or Config()
        runner = PostStepRunner(config, which=which or no_tools, console=quiet_console)
        return ScaffoldGenerator(
            config, subscriber, post_steps=runner, console=quiet_console
        )

    return factory


@pytest.fixture
def component_factory():
    """``make_component`` as a fixture."""
    return make_component


@pytest.fixture
def spec_factory():
    """``make_spec`` as a fixture."""
    return make_spec


@pytest.fixture
def which_factory():
    """``make_which`` as a fixture."""
    return make_which
