"""Type descriptor graph consumed by the translation core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class TypeKind(str, Enum):
    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    ENUM = "enum"
    DELEGATE = "delegate"
    ARRAY = "array"
    BYREF = "byref"
    NULLABLE = "nullable"
    GENERIC_PARAMETER = "generic_parameter"
    VOID = "void"


DECLARABLE_KINDS = frozenset(
    {TypeKind.CLASS, TypeKind.STRUCT, TypeKind.INTERFACE, TypeKind.ENUM, TypeKind.DELEGATE}
)


class Access(str, Enum):
    """Lua visibility of a member."""

    UNKNOWN = "unknown"
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    PACKAGE = "package"

    @property
    def requires_annotation(self) -> bool:
        return self in (Access.PRIVATE, Access.PROTECTED, Access.PACKAGE)


@dataclass(eq=False)
class ParameterDescriptor:
    name: Optional[str]
    type: "TypeDescriptor"
    is_optional: bool = False
    is_variadic: bool = False


@dataclass(eq=False)
class FieldDescriptor:
    name: str
    type: "TypeDescriptor"
    access: Access = Access.UNKNOWN
    is_static: bool = False
    is_compiler_generated: bool = False
    is_special_name: bool = False


@dataclass(eq=False)
class PropertyDescriptor:
    """A property; ``access`` follows the getter, falling back to the setter."""

    name: str
    type: "TypeDescriptor"
    access: Access = Access.UNKNOWN
    is_static: bool = False
    index_parameters: List[ParameterDescriptor] = field(default_factory=list)
    hides_base: bool = False
    is_compiler_generated: bool = False
    is_special_name: bool = False


@dataclass(eq=False)
class MethodDescriptor:
    name: str
    parameters: List[ParameterDescriptor] = field(default_factory=list)
    return_type: Optional["TypeDescriptor"] = None
    access: Access = Access.UNKNOWN
    is_static: bool = False
    is_special_name: bool = False
    is_compiler_generated: bool = False
    is_async_state_machine: bool = False
    generic_arguments: List["TypeDescriptor"] = field(default_factory=list)
    contains_generic_parameters: bool = False

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_arguments) or self.contains_generic_parameters


@dataclass(eq=False)
class EnumValue:
    name: str
    value: int


@dataclass(eq=False)
class TypeDescriptor:
    """Read-only handle for one reflected type.

    Two descriptors denote the same type iff their ``identity`` tokens are
    equal; the identity is the key of every cache in a generation run.
    """

    identity: str
    name: str
    namespace: Optional[str] = None
    kind: TypeKind = TypeKind.CLASS
    declaring_type: Optional["TypeDescriptor"] = None
    element_type: Optional["TypeDescriptor"] = None
    generic_definition: Optional["TypeDescriptor"] = None
    generic_arguments: List["TypeDescriptor"] = field(default_factory=list)
    is_generic: bool = False
    base_type: Optional["TypeDescriptor"] = None
    interfaces: List["TypeDescriptor"] = field(default_factory=list)
    fields: List[FieldDescriptor] = field(default_factory=list)
    properties: List[PropertyDescriptor] = field(default_factory=list)
    methods: List[MethodDescriptor] = field(default_factory=list)
    constructors: List[MethodDescriptor] = field(default_factory=list)
    enum_values: List[EnumValue] = field(default_factory=list)
    invoke: Optional[MethodDescriptor] = None
    is_compiler_generated: bool = False
    is_special_name: bool = False
    is_generated_code: bool = False
    is_method_parameter: bool = False
    constraints: List["TypeDescriptor"] = field(default_factory=list)
    has_reference_type_constraint: bool = False
    is_external: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __repr__(self) -> str:
        return f"TypeDescriptor({self.identity!r}, kind={self.kind.value})"

    @property
    def is_void(self) -> bool:
        return self.kind is TypeKind.VOID

    @property
    def is_enum(self) -> bool:
        return self.kind is TypeKind.ENUM

    @property
    def is_array(self) -> bool:
        return self.kind is TypeKind.ARRAY

    @property
    def is_byref(self) -> bool:
        return self.kind is TypeKind.BYREF

    @property
    def is_delegate(self) -> bool:
        return self.kind is TypeKind.DELEGATE

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    @property
    def is_generic_parameter(self) -> bool:
        return self.kind is TypeKind.GENERIC_PARAMETER

    @property
    def is_generic_method_parameter(self) -> bool:
        return self.is_generic_parameter and self.is_method_parameter

    @property
    def is_generic_type_parameter(self) -> bool:
        return self.is_generic_parameter and not self.is_method_parameter

    @property
    def is_class(self) -> bool:
        """Reference types other than interfaces."""
        return self.kind in (TypeKind.CLASS, TypeKind.DELEGATE, TypeKind.ARRAY)

    @property
    def is_declarable(self) -> bool:
        return self.kind in DECLARABLE_KINDS


@dataclass
class AssemblyDump:
    """All descriptors loaded from one dump file."""

    name: str
    types: List[TypeDescriptor]
    source: Optional[str] = None


__all__ = [
    "Access",
    "AssemblyDump",
    "DECLARABLE_KINDS",
    "EnumValue",
    "FieldDescriptor",
    "MethodDescriptor",
    "ParameterDescriptor",
    "PropertyDescriptor",
    "TypeDescriptor",
    "TypeKind",
]
