"""Per-language knowledge shared by the root-file writer and the post-steps.

A component's ``language`` string is mapped to a :class:`LanguageProfile`
that lists its prerequisites, the manual install/dev commands printed in the
README, its ignore-file entries and the manifest files that trigger
dependency installation.  Unknown languages have no profile and are skipped
everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LanguageFamily(str, Enum):
    """Dependency-install families."""

    NODE = "node"
    RUST = "rust"
    PYTHON = "python"
    GO = "go"


@dataclass(frozen=True)
class LanguageProfile:
    """Static facts about one language family."""

    family: LanguageFamily
    prerequisite: str
    install_steps: list[str] = field(default_factory=list)
    dev_command: str = ""
    ignore_entries: list[str] = field(default_factory=list)
    manifests: list[str] = field(default_factory=list)


PROFILES: dict[LanguageFamily, LanguageProfile] = {
    LanguageFamily.NODE: LanguageProfile(
        family=LanguageFamily.NODE,
        prerequisite="Node.js 18+ and npm/pnpm",
        install_steps=["npm install"],
        dev_command="npm run dev",
        ignore_entries=["node_modules/", ".svelte-kit/", "build/", ".env"],
        manifests=["package.json"],
    ),
    LanguageFamily.RUST: LanguageProfile(
        family=LanguageFamily.RUST,
        prerequisite="Rust 1.70+ and Cargo",
        install_steps=["cargo fetch"],
        dev_command="cargo run",
        ignore_entries=["target/", "Cargo.lock"],
        manifests=["Cargo.toml"],
    ),
    LanguageFamily.PYTHON: LanguageProfile(
        family=LanguageFamily.PYTHON,
        prerequisite="Python 3.11+",
        install_steps=[
            "python -m venv venv",
            "source venv/bin/activate",
            "pip install -r requirements.txt",
        ],
        dev_command="uvicorn app.main:app --reload",
        ignore_entries=["venv/", ".venv/", "__pycache__/", "*.pyc", ".env"],
        manifests=["pyproject.toml", "requirements.txt"],
    ),
    LanguageFamily.GO: LanguageProfile(
        family=LanguageFamily.GO,
        prerequisite="Go 1.21+",
        install_steps=["go mod download"],
        dev_command="go run .",
        ignore_entries=["bin/", ".env"],
        manifests=["go.mod"],
    ),
}

_LANGUAGE_FAMILIES: dict[str, LanguageFamily] = {
    "typescript": LanguageFamily.NODE,
    "javascript": LanguageFamily.NODE,
    "node": LanguageFamily.NODE,
    "rust": LanguageFamily.RUST,
    "python": LanguageFamily.PYTHON,
    "go": LanguageFamily.GO,
    "golang": LanguageFamily.GO,
}


def language_family(language: str) -> LanguageFamily | None:
    """Return the family for a component language, or ``None`` if unsupported."""
    return _LANGUAGE_FAMILIES.get(language.strip().lower())


def profile_for(language: str) -> LanguageProfile | None:
    family = language_family(language)
    return PROFILES[family] if family is not None else None
