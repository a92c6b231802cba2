"""Declaration synthesis: one descriptor in, one declaration block out."""

from __future__ import annotations

from typing import List, Union

from .collect import MemberCollector
from .logging import get_logger
from .mapping import QualifiedNameResolver, TypeMapper
from .models import TypeDescriptor
from .records import (
    ClassDeclaration,
    Constructor,
    Declaration,
    EnumDeclaration,
    EnumMember,
    Field,
    GenericMethod,
    MethodGroup,
    Operator,
    RenderedDeclaration,
)
from .render import render_declaration


class TranslationError(RuntimeError):
    """Raised when a single type cannot be translated."""

    def __init__(self, identity: str, reason: str) -> None:
        super().__init__(f"{identity}: {reason}")
        self.identity = identity
        self.reason = reason


class DeclarationSynthesizer:
    """Assembles collected members into enum or class declarations."""

    def __init__(
        self,
        resolver: QualifiedNameResolver,
        mapper: TypeMapper,
        collector: MemberCollector,
        *,
        flatten_inheritance: bool = False,
    ) -> None:
        self.resolver = resolver
        self.mapper = mapper
        self.collector = collector
        self.flatten_inheritance = flatten_inheritance
        self.logger = get_logger("synthesis")

    def synthesize(self, type_: TypeDescriptor) -> Declaration:
        if type_.is_enum:
            return self._synthesize_enum(type_)
        return self._synthesize_class(type_)

    def translate(self, type_: TypeDescriptor) -> RenderedDeclaration:
        """Synthesize and render ``type_``; any failure surfaces as ``TranslationError``."""
        try:
            declaration = self.synthesize(type_)
            text = render_declaration(declaration)
        except TranslationError:
            raise
        except Exception as exc:
            raise TranslationError(type_.identity, f"{type(exc).__name__}: {exc}") from exc
        return RenderedDeclaration(
            identity=type_.identity,
            qualified_name=declaration.name,
            namespace=type_.namespace,
            text=text,
        )

    def _synthesize_enum(self, type_: TypeDescriptor) -> EnumDeclaration:
        members = []
        for value in type_.enum_values:
            if isinstance(value.value, bool) or not isinstance(value.value, int):
                raise TranslationError(
                    type_.identity, f"enum member {value.name} has non-integer value {value.value!r}"
                )
            members.append(EnumMember(value.name, value.value))
        return EnumDeclaration(name=self.resolver.resolve(type_), members=tuple(members))

    def _synthesize_class(self, type_: TypeDescriptor) -> ClassDeclaration:
        base_types, primary_is_opaque = self.collector.collect_base_types(type_)
        include_ancestors = self.flatten_inheritance or primary_is_opaque
        if include_ancestors:
            self.logger.debug("Flattening ancestors into %s", type_.identity)

        fields: List[Field] = []
        operators: List[Operator] = []
        methods: List[Union[MethodGroup, GenericMethod]] = []
        constructor = None
        for record in self.collector.collect_members(type_, include_ancestors=include_ancestors):
            match record:
                case Field():
                    fields.append(record)
                case Operator():
                    operators.append(record)
                case MethodGroup() | GenericMethod():
                    methods.append(record)
                case Constructor():
                    constructor = record

        return ClassDeclaration(
            name=self.resolver.resolve(type_),
            base_types=tuple(base_types),
            fields=tuple(fields),
            operators=tuple(operators),
            methods=tuple(methods),
            constructor=constructor,
        )


__all__ = ["DeclarationSynthesizer", "TranslationError"]
