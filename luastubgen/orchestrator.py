"""Pipeline orchestration for stub generation runs."""

from __future__ import annotations

from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .collect import MemberCollector
from .config import GeneratorConfig
from .failsafe import build_failed_declaration
from .loader import DescriptorError, load_descriptor_dump
from .logging import get_logger
from .mapping import QualifiedNameResolver, TypeMapper
from .models import AssemblyDump, TypeDescriptor
from .records import MappedType, RenderedDeclaration
from .selection import select_types
from .stores import RunCache
from .synthesis import DeclarationSynthesizer, TranslationError
from .writer import StubWriter


@dataclass
class TypeFailure:
    """A type whose declaration was replaced by a failure note."""

    identity: str
    reason: str
    assembly: Optional[str] = None


@dataclass
class GenerationReport:
    """Outcome of one generation run."""

    files: List[Path] = field(default_factory=list)
    failures: List[TypeFailure] = field(default_factory=list)
    skipped_assemblies: List[str] = field(default_factory=list)
    type_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures and not self.skipped_assemblies


@dataclass
class GroupResult:
    namespace: Optional[str]
    declarations: List[RenderedDeclaration]
    failures: List[TypeFailure]


class GenerationContext:
    """Owns the caches and translation pipeline shared by one run."""

    def __init__(
        self,
        *,
        enumerable_style: str = "function",
        list_shapes: Iterable[str] = (),
        dictionary_shapes: Iterable[str] = (),
        flatten_inheritance: bool = False,
    ) -> None:
        self.name_cache: RunCache[str] = RunCache("qualified-name")
        self.mapping_cache: RunCache[MappedType] = RunCache("type-mapping")
        self.resolver = QualifiedNameResolver(self.name_cache)
        self.mapper = TypeMapper(
            self.resolver,
            self.mapping_cache,
            enumerable_style=enumerable_style,
            list_shapes=list_shapes,
            dictionary_shapes=dictionary_shapes,
        )
        self.collector = MemberCollector(self.resolver, self.mapper)
        self.synthesizer = DeclarationSynthesizer(
            self.resolver,
            self.mapper,
            self.collector,
            flatten_inheritance=flatten_inheritance,
        )
        self.logger = get_logger("context")

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "GenerationContext":
        return cls(
            enumerable_style=config.enumerable_style,
            list_shapes=config.generic_shapes.list_shapes,
            dictionary_shapes=config.generic_shapes.dictionary_shapes,
            flatten_inheritance=config.flatten_inheritance,
        )

    def translate(self, type_: TypeDescriptor) -> RenderedDeclaration:
        return self.synthesizer.translate(type_)

    def translate_group(
        self,
        namespace: Optional[str],
        types: Sequence[TypeDescriptor],
        *,
        assembly: Optional[str] = None,
    ) -> GroupResult:
        """Translate one namespace group; a failing type leaves a note in its slot."""
        declarations: List[RenderedDeclaration] = []
        failures: List[TypeFailure] = []
        for type_ in types:
            try:
                declarations.append(self.translate(type_))
            except TranslationError as exc:
                self.logger.warning("Translation failed for %s: %s", exc.identity, exc.reason)
                failures.append(TypeFailure(exc.identity, exc.reason, assembly))
                declarations.append(build_failed_declaration(exc.identity, type_.namespace, exc.reason))
        return GroupResult(namespace, declarations, failures)

    def translate_all(
        self,
        groups: Sequence[Tuple[Optional[str], Sequence[TypeDescriptor]]],
        *,
        workers: int = 1,
        assembly: Optional[str] = None,
    ) -> List[GroupResult]:
        """Translate namespace groups concurrently; results keep the input group order."""
        if workers <= 1 or len(groups) <= 1:
            return [self.translate_group(ns, types, assembly=assembly) for ns, types in groups]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="luastubgen") as executor:
            return list(
                executor.map(lambda group: self.translate_group(group[0], group[1], assembly=assembly), groups)
            )


def group_by_namespace(
    types: Iterable[TypeDescriptor],
) -> List[Tuple[Optional[str], List[TypeDescriptor]]]:
    """Group types by namespace in first-appearance order."""
    grouped: "OrderedDict[Optional[str], List[TypeDescriptor]]" = OrderedDict()
    for type_ in types:
        grouped.setdefault(type_.namespace or None, []).append(type_)
    return list(grouped.items())


class Orchestrator:
    """Coordinates loading, selection, translation and writing for a run."""

    def __init__(
        self,
        loader: Callable[[Path], AssemblyDump] | None = None,
        context_factory: Callable[[GeneratorConfig], GenerationContext] | None = None,
    ) -> None:
        self.loader = loader or load_descriptor_dump
        self.context_factory = context_factory or GenerationContext.from_config
        self.logger = get_logger("orchestrator")

    def run(
        self,
        config: GeneratorConfig,
        *,
        output_dir: Path | None = None,
        workers: int | None = None,
    ) -> GenerationReport:
        target = output_dir or config.resolved_output_dir
        worker_count = workers or config.workers
        context = self.context_factory(config)
        writer = StubWriter(target, templates_dir=config.templates_dir)
        report = GenerationReport()
        processed_namespaces: List[Optional[str]] = []

        self.logger.info("Generating stubs into %s", target)
        for dump, filters in self._load_assemblies(config, report):
            selected = select_types(dump.types, filters, context.resolver)
            groups = group_by_namespace(selected)
            report.type_count += len(selected)
            processed_namespaces.extend(type_.namespace for type_ in selected)
            results = context.translate_all(groups, workers=worker_count, assembly=dump.name)
            for result in results:
                report.files.append(writer.write_namespace(dump.name, result.namespace, result.declarations))
                report.failures.extend(result.failures)

        report.files.append(writer.write_global(processed_namespaces))
        self.logger.info(
            "Generated %d files for %d types (%d failed)",
            len(report.files),
            report.type_count,
            len(report.failures),
        )
        self.logger.debug(
            "Cache usage: names=%s mapping=%s",
            context.name_cache.stats(),
            context.mapping_cache.stats(),
        )
        return report

    def list_types(self, config: GeneratorConfig) -> Dict[str, List[str]]:
        """Return the qualified names each assembly would generate."""
        context = self.context_factory(config)
        report = GenerationReport()
        listing: Dict[str, List[str]] = {}
        for dump, filters in self._load_assemblies(config, report):
            selected = select_types(dump.types, filters, context.resolver)
            listing[dump.name] = [context.resolver.resolve(type_) for type_ in selected]
        return listing

    def _load_assemblies(
        self, config: GeneratorConfig, report: GenerationReport
    ) -> Iterator[Tuple[AssemblyDump, List[str]]]:
        for assembly in config.assemblies:
            if not assembly.path.exists():
                self.logger.warning("Descriptor dump not found: %s", assembly.path)
                report.skipped_assemblies.append(str(assembly.path))
                continue
            try:
                dump = self.loader(assembly.path)
            except DescriptorError as exc:
                self.logger.error("Skipping %s: %s", assembly.path, exc)
                report.skipped_assemblies.append(str(assembly.path))
                continue
            self.logger.info("Loaded assembly %s (%d types)", dump.name, len(dump.types))
            yield dump, assembly.types


__all__ = [
    "GenerationContext",
    "GenerationReport",
    "GroupResult",
    "Orchestrator",
    "TypeFailure",
    "group_by_namespace",
]
