"""Immutable records produced by member collection and declaration synthesis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .models import Access


@dataclass(frozen=True)
class MappedType:
    """Target type expression plus whether it must be parenthesized when composed."""

    text: str
    needs_parens: bool = False

    def render(self, consider_precedence: bool = False) -> str:
        if consider_precedence and self.needs_parens:
            return f"({self.text})"
        return self.text


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str
    is_optional: bool = False
    is_variadic: bool = False


@dataclass(frozen=True)
class GenericParameter:
    name: str
    constraint: Optional[str] = None


@dataclass(frozen=True)
class OverloadSignature:
    is_instance: bool
    parameters: Tuple[Parameter, ...] = ()
    return_type: str = ""


@dataclass(frozen=True)
class Field:
    name: str
    type: str
    access: Access = Access.UNKNOWN
    is_static: bool = False


@dataclass(frozen=True)
class Operator:
    name: str
    result_type: str
    binary: bool = False
    operand_type: str = ""


@dataclass(frozen=True)
class MethodGroup:
    class_name: str
    name: str
    is_instance: bool
    is_async: bool = False
    access: Access = Access.UNKNOWN
    parameters: Tuple[Parameter, ...] = ()
    return_type: str = ""
    overloads: Tuple[OverloadSignature, ...] = ()


@dataclass(frozen=True)
class GenericMethod:
    class_name: str
    name: str
    is_instance: bool
    is_async: bool = False
    access: Access = Access.UNKNOWN
    generic_parameters: Tuple[GenericParameter, ...] = ()
    parameters: Tuple[Parameter, ...] = ()
    return_type: str = ""


@dataclass(frozen=True)
class Constructor:
    class_name: str
    access: Access = Access.UNKNOWN
    parameters: Tuple[Parameter, ...] = ()
    overloads: Tuple[OverloadSignature, ...] = ()


MemberRecord = Union[Field, Operator, MethodGroup, GenericMethod, Constructor]


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: int


@dataclass(frozen=True)
class EnumDeclaration:
    name: str
    members: Tuple[EnumMember, ...] = ()


@dataclass(frozen=True)
class ClassDeclaration:
    name: str
    base_types: Tuple[str, ...] = ()
    fields: Tuple[Field, ...] = ()
    operators: Tuple[Operator, ...] = ()
    methods: Tuple[Union[MethodGroup, GenericMethod], ...] = ()
    constructor: Optional[Constructor] = None


Declaration = Union[EnumDeclaration, ClassDeclaration]


@dataclass(frozen=True)
class RenderedDeclaration:
    """Declaration text tagged for the writer."""

    identity: str
    qualified_name: str
    namespace: Optional[str]
    text: str
    failed: bool = False


__all__ = [
    "ClassDeclaration",
    "Constructor",
    "Declaration",
    "EnumDeclaration",
    "EnumMember",
    "Field",
    "GenericMethod",
    "GenericParameter",
    "MappedType",
    "MemberRecord",
    "MethodGroup",
    "Operator",
    "OverloadSignature",
    "Parameter",
    "RenderedDeclaration",
]
