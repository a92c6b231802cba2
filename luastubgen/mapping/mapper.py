"""Translation of type descriptors into Lua annotation type expressions."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..collect.parameters import synthesize_parameters
from ..constants import (
    DELEGATE_ROOTS,
    DICTIONARY_SHAPES,
    ENUMERABLE_SHAPES,
    ENUMERABLE_STYLES,
    ENUMERATOR_SHAPES,
    LIST_SHAPES,
    OPAQUE_TOKEN,
    PRIMITIVE_TOKENS,
    VOID,
)
from ..logging import get_logger
from ..models import Access, TypeDescriptor
from ..records import MappedType
from ..render.callables import format_function_type
from ..stores import RunCache
from .helpers import find_generic_implementation, generic_shape, iter_hierarchy, nullable_underlying
from .names import QualifiedNameResolver


@dataclass
class _Frame:
    identity: str
    tainted: bool = False


class CompositeType:
    """Union of alternative shapes for a type with no single structural spelling."""

    def __init__(self) -> None:
        self._parts: List[MappedType] = []

    def add(self, text: str, needs_parens: bool = False) -> None:
        if any(part.text == text for part in self._parts):
            return
        self._parts.append(MappedType(text, needs_parens))

    def __len__(self) -> int:
        return len(self._parts)

    def to_mapped(self) -> MappedType:
        if not self._parts:
            return MappedType(OPAQUE_TOKEN)
        if len(self._parts) == 1:
            only = self._parts[0]
            return MappedType(only.text, only.needs_parens)
        text = " | ".join(part.render(consider_precedence=True) for part in self._parts)
        return MappedType(text, True)


class TypeMapper:
    """Maps descriptors to annotation expressions, caching one result per identity.

    The cached value is independent of the caller's precedence context;
    ``map_type(..., consider_precedence=True)`` only decides whether the cached
    text is wrapped in parentheses at the call site.
    """

    def __init__(
        self,
        resolver: QualifiedNameResolver,
        cache: RunCache[MappedType] | None = None,
        *,
        enumerable_style: str = "function",
        list_shapes: Iterable[str] = (),
        dictionary_shapes: Iterable[str] = (),
    ) -> None:
        if enumerable_style not in ENUMERABLE_STYLES:
            raise ValueError(f"Unknown enumerable style: {enumerable_style}")
        self.resolver = resolver
        self.enumerable_style = enumerable_style
        self._cache: RunCache[MappedType] = cache if cache is not None else RunCache("type-mapping")
        self._list_shapes = frozenset(LIST_SHAPES).union(list_shapes)
        self._dictionary_shapes = frozenset(DICTIONARY_SHAPES).union(dictionary_shapes)
        self._local = threading.local()
        self._logger = get_logger("mapper")

    def map(self, type_: TypeDescriptor) -> MappedType:
        cached = self._cache.get(type_.identity)
        if cached is not None:
            return cached

        stack = self._stack()
        for index, frame in enumerate(stack):
            if frame.identity == type_.identity:
                # Recursive shape: every frame on the cycle saw a placeholder,
                # so none of them may be cached. Each one is recomputed from
                # its own root, independent of which type was mapped first.
                for above in stack[index:]:
                    above.tainted = True
                self._logger.debug("Recursive mapping of %s; using opaque token", type_.identity)
                return MappedType(OPAQUE_TOKEN)

        frame = _Frame(type_.identity)
        stack.append(frame)
        try:
            result = self._compute(type_)
        finally:
            stack.pop()

        if frame.tainted:
            return result
        return self._cache.store(type_.identity, result)

    def map_type(self, type_: TypeDescriptor, consider_precedence: bool = False) -> str:
        return self.map(type_).render(consider_precedence)

    def map_return_type(self, type_: Optional[TypeDescriptor]) -> str:
        if type_ is None:
            return VOID
        return self.map_type(type_)

    # ------------------------------------------------------------------
    # Internal helpers

    def _stack(self) -> List[_Frame]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = []
            self._local.stack = stack
        return stack

    def _compute(self, type_: TypeDescriptor) -> MappedType:
        if type_.is_void:
            return MappedType(VOID)

        primitive = PRIMITIVE_TOKENS.get(type_.identity)
        if primitive is not None:
            return MappedType(primitive)

        if type_.is_generic_method_parameter:
            return MappedType(type_.name)

        if type_.is_enum:
            return MappedType(self.resolver.resolve(type_))

        if type_.is_array:
            if type_.element_type is None:
                return MappedType(f"{OPAQUE_TOKEN}[]")
            return MappedType(f"{self.map_type(type_.element_type, consider_precedence=True)}[]")

        if type_.is_byref:
            if type_.element_type is None:
                return MappedType(OPAQUE_TOKEN)
            return self.map(type_.element_type)

        if type_.is_delegate and type_.identity not in DELEGATE_ROOTS:
            return self._map_delegate(type_)

        underlying = nullable_underlying(type_)
        if underlying is not None:
            return MappedType(f"{self.map_type(underlying, consider_precedence=True)}|nil", True)

        shape = generic_shape(type_)
        arguments = type_.generic_arguments
        if shape in self._list_shapes and len(arguments) >= 1:
            return MappedType(f"{self.map_type(arguments[0], consider_precedence=True)}[]")
        if shape in self._dictionary_shapes and len(arguments) >= 2:
            key = self.map_type(arguments[0])
            value = self.map_type(arguments[1])
            return MappedType(f"{{ [{key}]: {value} }}")

        qualified_name = self.resolver.resolve(type_)
        if qualified_name != OPAQUE_TOKEN:
            return MappedType(qualified_name)

        return self._map_composite(type_)

    def _map_delegate(self, type_: TypeDescriptor) -> MappedType:
        invoke = type_.invoke
        if invoke is None:
            return MappedType(format_function_type((), VOID), True)
        parameters = synthesize_parameters(invoke, self, consider_precedence=True)
        return_type = self.map_return_type(invoke.return_type)
        return MappedType(format_function_type(parameters, return_type), True)

    def _map_composite(self, type_: TypeDescriptor) -> MappedType:
        composite = CompositeType()
        composite.add(OPAQUE_TOKEN)

        for current in iter_hierarchy(type_):
            for prop in current.properties:
                if prop.is_static or prop.access is not Access.PUBLIC:
                    continue
                if len(prop.index_parameters) != 1:
                    continue
                key = self.map_type(prop.index_parameters[0].type)
                value = self.map_type(prop.type)
                composite.add(f"{{ [{key}]: {value} }}")

        for shapes in (ENUMERABLE_SHAPES, ENUMERATOR_SHAPES):
            implementation = find_generic_implementation(type_, shapes)
            if implementation is None or not implementation.generic_arguments:
                continue
            item = self.map_type(implementation.generic_arguments[0])
            if self.enumerable_style == "table":
                composite.add(f"{{ [nil]: {item} }}")
            else:
                composite.add(f"fun(): {item}", needs_parens=True)

        return composite.to_mapped()


__all__ = ["CompositeType", "TypeMapper"]
