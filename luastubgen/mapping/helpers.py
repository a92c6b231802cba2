"""Introspection helpers over the type descriptor graph."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence

from ..constants import AWAITABLE_SHAPES, NULLABLE_SHAPE
from ..models import MethodDescriptor, TypeDescriptor, TypeKind


def iter_hierarchy(type_: TypeDescriptor) -> Iterator[TypeDescriptor]:
    """Yield ``type_`` followed by its base types, most-derived first."""
    seen: set[str] = set()
    current: Optional[TypeDescriptor] = type_
    while current is not None and current.identity not in seen:
        seen.add(current.identity)
        yield current
        current = current.base_type


def declaring_chain(type_: TypeDescriptor) -> List[TypeDescriptor]:
    """Return the declaring types of ``type_`` ordered outermost first."""
    chain: List[TypeDescriptor] = []
    decl = type_.declaring_type
    while decl is not None and decl not in chain:
        chain.append(decl)
        decl = decl.declaring_type
    chain.reverse()
    return chain


def is_compiler_generated(type_: Optional[TypeDescriptor]) -> bool:
    """True when the type or any of its declaring types is compiler generated."""
    seen: set[str] = set()
    while type_ is not None and type_.identity not in seen:
        if type_.is_compiler_generated:
            return True
        seen.add(type_.identity)
        type_ = type_.declaring_type
    return False


def nullable_underlying(type_: TypeDescriptor) -> Optional[TypeDescriptor]:
    if type_.kind is TypeKind.NULLABLE:
        return type_.element_type
    definition = type_.generic_definition
    if definition is not None and definition.identity == NULLABLE_SHAPE and type_.generic_arguments:
        return type_.generic_arguments[0]
    return None


def generic_shape(type_: TypeDescriptor) -> Optional[str]:
    """Identity of the generic definition behind an instantiation, if any."""
    if type_.generic_definition is not None:
        return type_.generic_definition.identity
    return None


def find_generic_implementation(
    type_: TypeDescriptor, shapes: Sequence[str]
) -> Optional[TypeDescriptor]:
    """Return the first instantiation of one of ``shapes`` that ``type_`` is or implements."""
    for current in iter_hierarchy(type_):
        if generic_shape(current) in shapes:
            return current
        for interface in current.interfaces:
            if generic_shape(interface) in shapes:
                return interface
    return None


def is_awaitable(type_: Optional[TypeDescriptor]) -> bool:
    if type_ is None:
        return False
    for current in iter_hierarchy(type_):
        if current.identity in AWAITABLE_SHAPES or generic_shape(current) in AWAITABLE_SHAPES:
            return True
    return False


def is_async_method(method: MethodDescriptor) -> bool:
    return is_awaitable(method.return_type) or method.is_async_state_machine


def is_supported_generic_method(method: MethodDescriptor) -> bool:
    """Decide whether a generic method can be expressed with ``---@generic``.

    Every generic argument must be a method-level parameter with a class
    constraint and must be named by one of the method's parameter types.
    Methods whose parameters mention type-level generic parameters are
    rejected outright.
    """
    if not method.is_generic:
        return False

    parameter_types = [param.type for param in method.parameters]
    if any(param_type.is_generic_type_parameter for param_type in parameter_types):
        return False

    for argument in method.generic_arguments:
        if argument.is_generic_type_parameter:
            return False
        constraints = argument.constraints
        if any(not constraint.is_class for constraint in constraints):
            return False
        if not constraints and not argument.has_reference_type_constraint:
            return False
        if not any(
            param_type.is_generic_method_parameter and param_type.name == argument.name
            for param_type in parameter_types
        ):
            return False

    return True


def simple_member_name(name: str) -> str:
    """Strip explicit-interface qualification (``Ns.IFoo.Bar`` → ``Bar``)."""
    last_dot = name.rfind(".")
    return name[last_dot + 1 :] if last_dot > 0 else name


def complex_member_name(name: str) -> str:
    """Quote member names Lua cannot spell as identifiers."""
    if any(char in name for char in "<.>"):
        return f'["{name}"]'
    return name


def unique(items: Iterable[str]) -> List[str]:
    result: List[str] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


__all__ = [
    "complex_member_name",
    "declaring_chain",
    "find_generic_implementation",
    "generic_shape",
    "is_async_method",
    "is_awaitable",
    "is_compiler_generated",
    "is_supported_generic_method",
    "iter_hierarchy",
    "nullable_underlying",
    "simple_member_name",
    "unique",
]
