"""Member collection: fields, operators, methods and constructors of one type."""

from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING, List, Optional, Sequence, Set, Tuple

from ..constants import OBJECT_TYPE_NAME, OPAQUE_TOKEN, OPERATOR_NAMES, PRIMITIVE_TOKENS
from ..logging import get_logger
from ..models import Access, MethodDescriptor, TypeDescriptor
from ..records import (
    Constructor,
    Field,
    GenericMethod,
    GenericParameter,
    MemberRecord,
    MethodGroup,
    Operator,
    OverloadSignature,
)
from ..mapping.helpers import (
    complex_member_name,
    is_async_method,
    is_supported_generic_method,
    iter_hierarchy,
    simple_member_name,
    unique,
)
from .parameters import synthesize_parameters

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..mapping.mapper import TypeMapper
    from ..mapping.names import QualifiedNameResolver

_GroupKey = Tuple[str, Access, bool, bool]


class MemberCollector:
    """Walks a type (optionally with its ancestors) and emits member records."""

    def __init__(self, resolver: "QualifiedNameResolver", mapper: "TypeMapper") -> None:
        self.resolver = resolver
        self.mapper = mapper
        self.logger = get_logger("collect")

    def collect_members(
        self, type_: TypeDescriptor, include_ancestors: bool = False
    ) -> List[MemberRecord]:
        """Return member records in emission order.

        Property-backed fields come first, then plain fields, operators,
        method groups, generic methods and finally the constructor group.
        """
        records: List[MemberRecord] = []
        records.extend(self.collect_fields(type_, include_ancestors))
        records.extend(self.collect_operators(type_))
        records.extend(self.collect_methods(type_, include_ancestors))
        records.extend(self.collect_generic_methods(type_, include_ancestors))
        constructor = self.collect_constructor(type_)
        if constructor is not None:
            records.append(constructor)
        return records

    def collect_base_types(self, type_: TypeDescriptor) -> Tuple[List[str], bool]:
        """Return the ``---@class`` base list and whether the primary base is opaque."""
        bases: List[str] = []
        primary_is_opaque = False

        base = type_.base_type
        if base is not None and base.identity != OBJECT_TYPE_NAME:
            name = self.resolver.resolve(base)
            primary_is_opaque = name == OPAQUE_TOKEN
            bases.append(name)
        elif not type_.is_interface and type_.identity != OBJECT_TYPE_NAME:
            bases.append(OBJECT_TYPE_NAME)

        for interface in type_.interfaces:
            if interface.is_generic:
                continue
            bases.append(self.resolver.resolve(interface))

        primitive = PRIMITIVE_TOKENS.get(type_.identity)
        if primitive is not None:
            bases.append(primitive)

        for prop in type_.properties:
            if prop.is_static or prop.access is not Access.PUBLIC:
                continue
            if len(prop.index_parameters) != 1:
                continue
            key = self.mapper.map_type(prop.index_parameters[0].type)
            value = self.mapper.map_type(prop.type)
            bases.append(f"{{ [{key}]: {value} }}")

        return unique(bases), primary_is_opaque

    # ------------------------------------------------------------------
    # Walks

    def collect_fields(self, type_: TypeDescriptor, include_ancestors: bool = False) -> List[Field]:
        fields: List[Field] = []
        emitted: Set[str] = set()
        hidden: Set[str] = set()
        candidates = self._candidates(type_, include_ancestors)

        for current in candidates:
            for prop in current.properties:
                if prop.index_parameters:
                    continue
                if prop.is_compiler_generated or prop.is_special_name:
                    continue
                if prop.name in hidden:
                    continue
                self._add_field(fields, emitted, prop.name, prop.type, prop.access, prop.is_static)
                if prop.hides_base:
                    hidden.add(prop.name)

        for current in candidates:
            for field in current.fields:
                if field.is_compiler_generated or field.is_special_name:
                    continue
                self._add_field(fields, emitted, field.name, field.type, field.access, field.is_static)

        return fields

    def collect_operators(self, type_: TypeDescriptor) -> List[Operator]:
        operators: List[Operator] = []
        for method in type_.methods:
            if not method.is_special_name or method.is_generic or method.is_compiler_generated:
                continue
            parameters = method.parameters
            # LuaLS binds the first operand of a class operator to ``self``.
            if not parameters or parameters[0].type != type_:
                continue
            mapping = OPERATOR_NAMES.get(method.name)
            if mapping is None:
                continue
            name, binary = mapping
            result_type = self.mapper.map_return_type(method.return_type)
            if binary:
                if len(parameters) < 2:
                    continue
                operand = self.mapper.map_type(parameters[1].type)
                operators.append(Operator(name, result_type, binary=True, operand_type=operand))
            else:
                operators.append(Operator(name, result_type))
        return operators

    def collect_methods(
        self, type_: TypeDescriptor, include_ancestors: bool = False
    ) -> List[MethodGroup]:
        class_name = self.resolver.resolve(type_)
        groups: "OrderedDict[_GroupKey, List[MethodDescriptor]]" = OrderedDict()

        for current in self._candidates(type_, include_ancestors):
            for method in current.methods:
                if method.is_generic or method.is_compiler_generated:
                    continue
                key = (
                    simple_member_name(method.name),
                    method.access,
                    not method.is_static,
                    is_async_method(method),
                )
                groups.setdefault(key, []).append(method)

        records: List[MethodGroup] = []
        for (name, access, is_instance, is_async), methods in groups.items():
            primary, overloads = methods[0], methods[1:]
            records.append(
                MethodGroup(
                    class_name=class_name,
                    name=name,
                    is_instance=is_instance,
                    is_async=is_async,
                    access=access,
                    parameters=synthesize_parameters(primary, self.mapper),
                    return_type=self.mapper.map_return_type(primary.return_type),
                    overloads=tuple(
                        OverloadSignature(
                            is_instance=not overload.is_static,
                            parameters=synthesize_parameters(overload, self.mapper),
                            return_type=self.mapper.map_return_type(overload.return_type),
                        )
                        for overload in overloads
                    ),
                )
            )
        return records

    def collect_generic_methods(
        self, type_: TypeDescriptor, include_ancestors: bool = False
    ) -> List[GenericMethod]:
        class_name = self.resolver.resolve(type_)
        records: List[GenericMethod] = []
        for current in self._candidates(type_, include_ancestors):
            for method in current.methods:
                if method.is_compiler_generated or not is_supported_generic_method(method):
                    continue
                records.append(
                    GenericMethod(
                        class_name=class_name,
                        name=simple_member_name(method.name),
                        is_instance=not method.is_static,
                        is_async=is_async_method(method),
                        access=method.access,
                        generic_parameters=self._generic_parameters(method),
                        parameters=synthesize_parameters(method, self.mapper),
                        return_type=self.mapper.map_return_type(method.return_type),
                    )
                )
        return records

    def collect_constructor(self, type_: TypeDescriptor) -> Optional[Constructor]:
        constructors = [
            ctor
            for ctor in type_.constructors
            if not ctor.is_static and not ctor.is_compiler_generated
        ]
        if not constructors:
            return None

        class_name = self.resolver.resolve(type_)
        primary = constructors[0]
        return Constructor(
            class_name=class_name,
            access=primary.access,
            parameters=synthesize_parameters(primary, self.mapper),
            overloads=tuple(
                OverloadSignature(
                    is_instance=False,
                    parameters=synthesize_parameters(ctor, self.mapper),
                    return_type=class_name,
                )
                for ctor in constructors[1:]
            ),
        )

    # ------------------------------------------------------------------
    # Internal helpers

    @staticmethod
    def _candidates(type_: TypeDescriptor, include_ancestors: bool) -> Sequence[TypeDescriptor]:
        if include_ancestors:
            return list(iter_hierarchy(type_))
        return [type_]

    def _add_field(
        self,
        fields: List[Field],
        emitted: Set[str],
        name: str,
        field_type: TypeDescriptor,
        access: Access,
        is_static: bool,
    ) -> None:
        if name in emitted:
            self.logger.debug("Skipping duplicate member %s; keeping the most-derived entry", name)
            return
        emitted.add(name)
        fields.append(
            Field(
                name=complex_member_name(name),
                type=self.mapper.map_type(field_type),
                access=access,
                is_static=is_static,
            )
        )

    def _generic_parameters(self, method: MethodDescriptor) -> Tuple[GenericParameter, ...]:
        parameters: List[GenericParameter] = []
        for argument in method.generic_arguments:
            constraint: Optional[str] = None
            if argument.constraints:
                constraint = ", ".join(self.resolver.resolve(item) for item in argument.constraints)
            elif argument.has_reference_type_constraint:
                constraint = OBJECT_TYPE_NAME
            parameters.append(GenericParameter(argument.name, constraint))
        return tuple(parameters)


__all__ = ["MemberCollector"]
