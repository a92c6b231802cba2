"""Helper utilities for constructing descriptor graphs in tests."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence

from luastubgen.models import (
    Access,
    EnumValue,
    MethodDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    TypeDescriptor,
    TypeKind,
)


class TypeBuilder:
    """Creates descriptors keyed by identity so repeated lookups share one instance."""

    def __init__(self) -> None:
        self._types: Dict[str, TypeDescriptor] = {}

    def type(self, identity: str, *, kind: TypeKind = TypeKind.CLASS, **attrs: object) -> TypeDescriptor:
        """Return the descriptor for ``identity``, creating it on first use."""
        existing = self._types.get(identity)
        if existing is not None:
            for key, value in attrs.items():
                setattr(existing, key, value)
            return existing
        namespace, _, name = identity.rpartition(".")
        attrs.setdefault("namespace", namespace or None)
        descriptor = TypeDescriptor(identity=identity, name=str(attrs.pop("name", name)), kind=kind, **attrs)
        self._types[identity] = descriptor
        return descriptor

    def system(self, name: str) -> TypeDescriptor:
        return self.type(f"System.{name}", kind=TypeKind.STRUCT)

    def nested(self, outer: TypeDescriptor, name: str, **attrs: object) -> TypeDescriptor:
        return self.type(
            f"{outer.identity}+{name}",
            name=name,
            namespace=outer.namespace,
            declaring_type=outer,
            **attrs,
        )

    def enum(self, identity: str, **values: int) -> TypeDescriptor:
        return self.type(
            identity,
            kind=TypeKind.ENUM,
            enum_values=[EnumValue(name, value) for name, value in values.items()],
        )

    def array(self, element: TypeDescriptor) -> TypeDescriptor:
        return self.type(f"{element.identity}[]", kind=TypeKind.ARRAY, name=f"{element.name}[]", element_type=element)

    def byref(self, element: TypeDescriptor) -> TypeDescriptor:
        return self.type(f"{element.identity}&", kind=TypeKind.BYREF, name=f"{element.name}&", element_type=element)

    def nullable(self, underlying: TypeDescriptor) -> TypeDescriptor:
        return self.type(
            f"System.Nullable`1[{underlying.identity}]",
            kind=TypeKind.NULLABLE,
            name="Nullable`1",
            namespace="System",
            element_type=underlying,
            is_generic=True,
        )

    def instantiate(self, definition: str, *arguments: TypeDescriptor, **attrs: object) -> TypeDescriptor:
        """Closed generic instantiation ``definition[arg, ...]``."""
        shape = self.type(definition, is_generic=True)
        identity = f"{definition}[{','.join(arg.identity for arg in arguments)}]"
        return self.type(
            identity,
            name=shape.name,
            namespace=shape.namespace,
            generic_definition=shape,
            generic_arguments=list(arguments),
            is_generic=True,
            **attrs,
        )

    def generic_parameter(
        self,
        name: str,
        *,
        method: bool = True,
        constraints: Sequence[TypeDescriptor] = (),
        reference_type: bool = False,
        owner: str = "Generic",
    ) -> TypeDescriptor:
        return self.type(
            f"{owner}!{name}",
            kind=TypeKind.GENERIC_PARAMETER,
            name=name,
            namespace=None,
            is_method_parameter=method,
            constraints=list(constraints),
            has_reference_type_constraint=reference_type,
        )

    def delegate(
        self,
        identity: str,
        parameters: Iterable[ParameterDescriptor] = (),
        returns: Optional[TypeDescriptor] = None,
        *,
        with_invoke: bool = True,
    ) -> TypeDescriptor:
        invoke = method("Invoke", *parameters, returns=returns) if with_invoke else None
        return self.type(identity, kind=TypeKind.DELEGATE, invoke=invoke)


def param(
    name: Optional[str], type_: TypeDescriptor, *, optional: bool = False, variadic: bool = False
) -> ParameterDescriptor:
    return ParameterDescriptor(name=name, type=type_, is_optional=optional, is_variadic=variadic)


def method(
    name: str,
    *parameters: ParameterDescriptor,
    returns: Optional[TypeDescriptor] = None,
    access: Access = Access.PUBLIC,
    **flags: object,
) -> MethodDescriptor:
    return MethodDescriptor(name=name, parameters=list(parameters), return_type=returns, access=access, **flags)


def prop(
    name: str,
    type_: TypeDescriptor,
    *,
    access: Access = Access.PUBLIC,
    index: Sequence[ParameterDescriptor] = (),
    **flags: object,
) -> PropertyDescriptor:
    return PropertyDescriptor(name=name, type=type_, access=access, index_parameters=list(index), **flags)


__all__ = ["TypeBuilder", "method", "param", "prop"]
