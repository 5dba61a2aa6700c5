"""Write a component's directory/file tree to disk.

The materializer walks a :class:`~scaffoldkit.models.ScaffoldTree`, creates
directories with ``mkdir -p`` semantics and writes files under the overwrite
policy: an existing file whose node is not ``overwritable`` is left alone
(not read, not rendered, not counted).  Everything else is (re)written.

The returned count mixes directories and files as equal-weight entries.  It is
a progress metric, not a file count.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from .errors import ScaffoldIOError, TemplateError
from .models import DirectoryNode, FileNode, ScaffoldTree, TemplateEngine
from .templates import TemplateRenderer
from .utils import console as default_console


class TreeMaterializer:
    """Creates directories and files for one scaffold tree at a time.

    Filesystem calls run in worker threads so the event loop stays free.
    Any ``OSError`` aborts the call as :class:`ScaffoldIOError`; entries
    already written stay on disk.
    """

    def __init__(
        self,
        renderer: TemplateRenderer,
        console: Optional[Console] = None,
    ) -> None:
        self.renderer = renderer
        self.console = console or default_console

    async def materialize(
        self,
        base_path: str | Path,
        tree: ScaffoldTree,
        context: dict[str, Any],
    ) -> int:
        """Materialize *tree* under *base_path*.

        Returns:
            Number of directories plus files created or rewritten.

        Raises:
            ScaffoldIOError: On any filesystem failure.
            TemplateError: When a templated payload cannot be rendered.
        """
        base = Path(base_path)
        created = 0
        for directory in tree.directories:
            created += await self._create_directory(base, directory, context)
        for file_node in tree.files:
            created += await self._create_file(base, file_node, context)
        return created

    async def _create_directory(
        self, parent: Path, node: DirectoryNode, context: dict[str, Any]
    ) -> int:
        path = parent / node.path
        await ensure_directory(path)
        created = 1
        for sub in node.subdirectories:
            created += await self._create_directory(path, sub, context)
        for file_node in node.files:
            created += await self._create_file(path, file_node, context)
        return created

    async def _create_file(
        self, parent: Path, node: FileNode, context: dict[str, Any]
    ) -> int:
        target = parent / node.path

        if not node.overwritable:
            try:
                exists = await asyncio.to_thread(target.exists)
            except OSError as exc:
                raise ScaffoldIOError(f"Failed to check {target}: {exc}", path=target) from exc
            if exists:
                self.console.print(f"  [dim]skip (exists) {escape(str(target))}[/dim]")
                return 0

        await ensure_directory(target.parent)

        if node.template_engine is TemplateEngine.HANDLEBARS:
            try:
                content = self.renderer.render(node.content, context)
            except TemplateError as exc:
                raise TemplateError(f"{target}: {exc}", path=target) from exc
        elif node.template_engine is TemplateEngine.NONE:
            content = node.content
        else:
            raise TemplateError(
                f"Unsupported template engine {node.template_engine!r}", path=target
            )

        try:
            await asyncio.to_thread(target.write_bytes, content.encode("utf-8"))
        except OSError as exc:
            raise ScaffoldIOError(f"Failed to write file {target}: {exc}", path=target) from exc
        return 1


async def ensure_directory(path: Path) -> None:
    """Create *path* and its parents; an existing directory is fine."""
    try:
        await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise ScaffoldIOError(f"Failed to create directory {path}: {exc}", path=path) from exc
