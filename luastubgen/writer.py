"""Writes namespace stub files and the global namespace index."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from .constants import NO_NAMESPACE
from .logging import get_logger
from .records import RenderedDeclaration
from .render import build_namespace_tree, render_namespace_block, render_namespace_tree

NAMESPACE_TEMPLATE = "namespace_file.lua.j2"
GLOBAL_TEMPLATE = "global.lua.j2"
GLOBAL_FILENAME = "global.lua"


class StubWriter:
    """Renders declarations through Jinja2 templates into ``<output>/<assembly>/...``."""

    def __init__(self, output_dir: Path, *, templates_dir: Path | None = None) -> None:
        self.output_dir = output_dir
        self._env = self._create_env(templates_dir)
        self.logger = get_logger("writer")

    @staticmethod
    def namespace_path(output_dir: Path, assembly_name: str, namespace: Optional[str]) -> Path:
        relative = namespace.replace(".", "/") if namespace else NO_NAMESPACE
        return output_dir / assembly_name / f"{relative}.lua"

    def render_namespace_file(
        self,
        assembly_name: str,
        namespace: Optional[str],
        declarations: Sequence[RenderedDeclaration],
    ) -> str:
        block = render_namespace_block(namespace, (item.text for item in declarations))
        template = self._env.get_template(NAMESPACE_TEMPLATE)
        return template.render(assembly_name=assembly_name, namespace_block=block)

    def write_namespace(
        self,
        assembly_name: str,
        namespace: Optional[str],
        declarations: Sequence[RenderedDeclaration],
    ) -> Path:
        path = self.namespace_path(self.output_dir, assembly_name, namespace)
        content = self.render_namespace_file(assembly_name, namespace, declarations)
        self.logger.info("Generating: %s", path)
        self._write(path, content)
        return path

    def render_global(self, namespaces: Iterable[Optional[str]]) -> str:
        tree = render_namespace_tree(build_namespace_tree(namespaces))
        return self._env.get_template(GLOBAL_TEMPLATE).render(tree=tree)

    def write_global(self, namespaces: Iterable[Optional[str]]) -> Path:
        path = self.output_dir / GLOBAL_FILENAME
        content = self.render_global(namespaces)
        self.logger.info("Generating: %s", path)
        self._write(path, content)
        return path

    @staticmethod
    def _write(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


__all__ = ["GLOBAL_FILENAME", "StubWriter"]
