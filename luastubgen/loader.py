"""Loading of pre-walked type descriptor dumps (JSON or YAML)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .logging import get_logger
from .models import (
    Access,
    AssemblyDump,
    EnumValue,
    FieldDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    TypeDescriptor,
    TypeKind,
)

_ACCESS_ALIASES: Dict[str, Access] = {
    "public": Access.PUBLIC,
    "private": Access.PRIVATE,
    "protected": Access.PROTECTED,
    "family": Access.PROTECTED,
    "package": Access.PACKAGE,
    "internal": Access.PACKAGE,
    "assembly": Access.PACKAGE,
    "unknown": Access.UNKNOWN,
}

_VOID_IDENTITIES = {"void", "System.Void"}


class DescriptorError(RuntimeError):
    """Raised when a descriptor dump is malformed; names the offending type."""

    def __init__(self, identity: Optional[str], reason: str) -> None:
        message = f"{identity}: {reason}" if identity else reason
        super().__init__(message)
        self.identity = identity
        self.reason = reason


def load_descriptor_dump(path: Path) -> AssemblyDump:
    """Read a dump file; ``.yml``/``.yaml`` are parsed as YAML, anything else as JSON."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DescriptorError(None, f"Cannot read descriptor dump {path}: {exc}") from exc

    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DescriptorError(None, f"Failed to parse {path.name}: {exc}") from exc

    if not isinstance(data, Mapping):
        raise DescriptorError(None, f"{path.name} must contain a mapping at the root")
    return parse_descriptor_dump(data, source=str(path), default_name=path.stem)


def parse_descriptor_dump(
    data: Mapping[str, Any], *, source: Optional[str] = None, default_name: str = "Assembly"
) -> AssemblyDump:
    entries = data.get("types") or []
    if not isinstance(entries, list):
        raise DescriptorError(None, "'types' must be a list")
    linker = _DumpLinker()
    types = linker.link(entries)
    name = data.get("assembly") or default_name
    get_logger("loader").debug(
        "Loaded %d descriptors (%d external references) from %s",
        len(types),
        linker.external_count,
        source or name,
    )
    return AssemblyDump(name=str(name), types=types, source=source)


class _DumpLinker:
    """Two-pass builder: create every descriptor, then resolve references by identity."""

    def __init__(self) -> None:
        self._types: Dict[str, TypeDescriptor] = {}
        self._external: Dict[str, TypeDescriptor] = {}

    @property
    def external_count(self) -> int:
        return len(self._external)

    def link(self, entries: List[Any]) -> List[TypeDescriptor]:
        ordered: List[TypeDescriptor] = []
        for entry in entries:
            if not isinstance(entry, Mapping):
                raise DescriptorError(None, f"type entry must be a mapping, got {type(entry).__name__}")
            descriptor = self._create(entry)
            if descriptor.identity in self._types:
                raise DescriptorError(descriptor.identity, "duplicate type identity")
            self._types[descriptor.identity] = descriptor
            ordered.append(descriptor)

        for entry, descriptor in zip(entries, ordered):
            self._fill(entry, descriptor)
        for descriptor in ordered:
            _check_acyclic(descriptor, "declaring_type", "cyclic declaring type")
            _check_acyclic(descriptor, "base_type", "cyclic base type")
        return ordered

    # ------------------------------------------------------------------
    # First pass

    def _create(self, entry: Mapping[str, Any]) -> TypeDescriptor:
        identity = entry.get("id")
        if not isinstance(identity, str) or not identity:
            raise DescriptorError(None, "type entry is missing 'id'")
        shape = identity.split("[", 1)[0]
        name = entry.get("name")
        if name is None:
            name = _simple_name(shape)
        if not isinstance(name, str) or not name:
            raise DescriptorError(identity, "'name' must be a non-empty string")
        namespace = entry.get("namespace", _namespace_of(shape))
        if namespace is not None and not isinstance(namespace, str):
            raise DescriptorError(identity, "'namespace' must be a string")
        kind = _parse_kind(identity, entry.get("kind", "class"))
        return TypeDescriptor(identity=identity, name=name, namespace=namespace or None, kind=kind)

    # ------------------------------------------------------------------
    # Second pass

    def _fill(self, entry: Mapping[str, Any], descriptor: TypeDescriptor) -> None:
        owner = descriptor.identity
        descriptor.declaring_type = self._optional_ref(entry.get("declaring_type"), owner)
        descriptor.element_type = self._optional_ref(entry.get("element_type"), owner)
        descriptor.generic_definition = self._optional_ref(entry.get("generic_definition"), owner)
        descriptor.generic_arguments = self._refs(entry.get("generic_arguments"), owner)
        descriptor.is_generic = bool(
            entry.get(
                "is_generic",
                descriptor.generic_definition is not None
                or bool(descriptor.generic_arguments)
                or "`" in descriptor.name,
            )
        )
        descriptor.base_type = self._optional_ref(entry.get("base_type"), owner)
        descriptor.interfaces = self._refs(entry.get("interfaces"), owner)
        descriptor.is_compiler_generated = bool(entry.get("compiler_generated", False))
        descriptor.is_special_name = bool(entry.get("special_name", False))
        descriptor.is_generated_code = bool(entry.get("generated_code", False))

        generic_parameter = entry.get("generic_parameter")
        if generic_parameter is not None:
            if not isinstance(generic_parameter, Mapping):
                raise DescriptorError(owner, "'generic_parameter' must be a mapping")
            descriptor.is_method_parameter = bool(generic_parameter.get("method", False))
            descriptor.constraints = self._refs(generic_parameter.get("constraints"), owner)
            descriptor.has_reference_type_constraint = bool(
                generic_parameter.get("reference_type", False)
            )

        descriptor.fields = [self._field(raw, owner) for raw in _as_list(entry.get("fields"), owner, "fields")]
        descriptor.properties = [
            self._property(raw, owner) for raw in _as_list(entry.get("properties"), owner, "properties")
        ]
        descriptor.methods = [self._method(raw, owner) for raw in _as_list(entry.get("methods"), owner, "methods")]
        descriptor.constructors = [
            self._method(raw, owner, default_name=".ctor")
            for raw in _as_list(entry.get("constructors"), owner, "constructors")
        ]
        invoke = entry.get("invoke")
        descriptor.invoke = self._method(invoke, owner, default_name="Invoke") if invoke is not None else None
        descriptor.enum_values = _enum_values(entry.get("enum_values"), owner)

    def _field(self, raw: Any, owner: str) -> FieldDescriptor:
        data = _member_mapping(raw, owner, "field")
        return FieldDescriptor(
            name=_member_name(data, owner, "field"),
            type=self._required_ref(data.get("type"), owner, "field type"),
            access=_parse_access(owner, data.get("access")),
            is_static=bool(data.get("static", False)),
            is_compiler_generated=bool(data.get("compiler_generated", False)),
            is_special_name=bool(data.get("special_name", False)),
        )

    def _property(self, raw: Any, owner: str) -> PropertyDescriptor:
        data = _member_mapping(raw, owner, "property")
        return PropertyDescriptor(
            name=_member_name(data, owner, "property"),
            type=self._required_ref(data.get("type"), owner, "property type"),
            access=_parse_access(owner, data.get("access")),
            is_static=bool(data.get("static", False)),
            index_parameters=[
                self._parameter(param, owner)
                for param in _as_list(data.get("index_parameters"), owner, "index_parameters")
            ],
            hides_base=bool(data.get("overrides", data.get("hides_base", False))),
            is_compiler_generated=bool(data.get("compiler_generated", False)),
            is_special_name=bool(data.get("special_name", False)),
        )

    def _method(self, raw: Any, owner: str, default_name: Optional[str] = None) -> MethodDescriptor:
        data = _member_mapping(raw, owner, "method")
        if default_name is not None and "name" not in data:
            name = default_name
        else:
            name = _member_name(data, owner, "method")
        return MethodDescriptor(
            name=name,
            parameters=[
                self._parameter(param, owner) for param in _as_list(data.get("parameters"), owner, "parameters")
            ],
            return_type=self._optional_ref(data.get("return_type"), owner),
            access=_parse_access(owner, data.get("access")),
            is_static=bool(data.get("static", False)),
            is_special_name=bool(data.get("special_name", False)),
            is_compiler_generated=bool(data.get("compiler_generated", False)),
            is_async_state_machine=bool(data.get("async_state_machine", False)),
            generic_arguments=self._refs(data.get("generic_arguments"), owner),
            contains_generic_parameters=bool(data.get("contains_generic_parameters", False)),
        )

    def _parameter(self, raw: Any, owner: str) -> ParameterDescriptor:
        data = _member_mapping(raw, owner, "parameter")
        name = data.get("name")
        if name is not None and not isinstance(name, str):
            raise DescriptorError(owner, "parameter 'name' must be a string")
        return ParameterDescriptor(
            name=name or None,
            type=self._required_ref(data.get("type"), owner, "parameter type"),
            is_optional=bool(data.get("optional", False)),
            is_variadic=bool(data.get("variadic", False)),
        )

    # ------------------------------------------------------------------
    # References

    def _required_ref(self, value: Any, owner: str, what: str) -> TypeDescriptor:
        if value is None:
            raise DescriptorError(owner, f"missing {what}")
        return self._ref(value, owner)

    def _optional_ref(self, value: Any, owner: str) -> Optional[TypeDescriptor]:
        if value is None:
            return None
        return self._ref(value, owner)

    def _refs(self, values: Any, owner: str) -> List[TypeDescriptor]:
        return [self._ref(value, owner) for value in _as_list(values, owner, "type references")]

    def _ref(self, value: Any, owner: str) -> TypeDescriptor:
        if not isinstance(value, str) or not value:
            raise DescriptorError(owner, f"invalid type reference {value!r}")
        known = self._types.get(value) or self._external.get(value)
        if known is not None:
            return known
        return self._external_descriptor(value)

    def _external_descriptor(self, identity: str) -> TypeDescriptor:
        """Descriptor for a type referenced by the dump but not described in it."""
        bracket = _trailing_bracket(identity)
        if identity in _VOID_IDENTITIES:
            descriptor = TypeDescriptor(identity=identity, name="Void", namespace="System", kind=TypeKind.VOID)
        elif identity.endswith("&"):
            descriptor = TypeDescriptor(identity=identity, name=_simple_name(identity), kind=TypeKind.BYREF)
            descriptor.element_type = self._ref(identity[:-1], identity)
        elif bracket > 0 and _is_array_rank(identity[bracket + 1 : -1]):
            # ``T[]``, ``T[,]`` and ``T[*]`` all map to a single-dimension Lua array.
            element = identity[:bracket]
            descriptor = TypeDescriptor(
                identity=identity,
                name=_simple_name(element.split("[", 1)[0]) + identity[bracket:],
                kind=TypeKind.ARRAY,
            )
            descriptor.element_type = self._ref(element, identity)
        else:
            # Instantiation arguments (``List`1[[System.Int32]]``) carry dots of their own.
            shape = identity.split("[", 1)[0]
            outer, _, _ = shape.rpartition("+")
            descriptor = TypeDescriptor(
                identity=identity,
                name=_simple_name(shape),
                namespace=_namespace_of(shape),
                is_generic="`" in identity,
            )
            if outer:
                descriptor.declaring_type = self._ref(outer, identity)
            if bracket > 0 and "`" in shape:
                descriptor.generic_definition = self._ref(shape, identity)
                descriptor.generic_arguments = [
                    self._ref(argument, identity)
                    for argument in _generic_argument_identities(identity[bracket + 1 : -1], identity)
                ]
        descriptor.is_external = True
        self._external[identity] = descriptor
        return descriptor


def _check_acyclic(descriptor: TypeDescriptor, attribute: str, reason: str) -> None:
    seen = {descriptor.identity}
    current = getattr(descriptor, attribute)
    while current is not None:
        if current.identity in seen:
            raise DescriptorError(descriptor.identity, reason)
        seen.add(current.identity)
        current = getattr(current, attribute)


def _trailing_bracket(identity: str) -> int:
    """Index of the ``[`` that opens the last bracket group, or -1."""
    if not identity.endswith("]"):
        return -1
    depth = 0
    for index in range(len(identity) - 1, -1, -1):
        if identity[index] == "]":
            depth += 1
        elif identity[index] == "[":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _is_array_rank(content: str) -> bool:
    return all(char in ",* " for char in content)


def _split_top_level(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return [part.strip() for part in parts]


def _generic_argument_identities(content: str, owner: str) -> List[str]:
    """Argument identities from ``[A],[B, Assembly]`` or ``A,B``; assembly qualifiers are dropped."""
    identities: List[str] = []
    for argument in _split_top_level(content):
        if argument.startswith("[") and argument.endswith("]"):
            argument = _split_top_level(argument[1:-1])[0]
        if not argument:
            raise DescriptorError(owner, "empty generic argument")
        identities.append(argument)
    return identities


def _simple_name(identity: str) -> str:
    tail = identity.rsplit("+", 1)[-1]
    return tail.rsplit(".", 1)[-1]


def _namespace_of(shape: str) -> Optional[str]:
    namespace, _, _ = shape.split("+", 1)[0].rpartition(".")
    return namespace or None


def _parse_kind(identity: str, value: Any) -> TypeKind:
    try:
        return TypeKind(str(value).lower())
    except ValueError as exc:
        raise DescriptorError(identity, f"unknown kind {value!r}") from exc


def _parse_access(owner: str, value: Any) -> Access:
    if value is None:
        return Access.UNKNOWN
    access = _ACCESS_ALIASES.get(str(value).strip().lower())
    if access is None:
        raise DescriptorError(owner, f"unknown access modifier {value!r}")
    return access


def _as_list(value: Any, owner: str, what: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DescriptorError(owner, f"'{what}' must be a list")
    return value


def _member_mapping(raw: Any, owner: str, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise DescriptorError(owner, f"{what} entry must be a mapping")
    return raw


def _member_name(data: Mapping[str, Any], owner: str, what: str) -> str:
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise DescriptorError(owner, f"{what} is missing 'name'")
    return name


def _enum_values(value: Any, owner: str) -> List[EnumValue]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        items = list(value.items())
    elif isinstance(value, list):
        items = []
        for raw in value:
            data = _member_mapping(raw, owner, "enum value")
            items.append((data.get("name"), data.get("value")))
    else:
        raise DescriptorError(owner, "'enum_values' must be a list or mapping")

    values: List[EnumValue] = []
    for name, number in items:
        if not isinstance(name, str) or not name:
            raise DescriptorError(owner, "enum value is missing 'name'")
        if isinstance(number, bool) or not isinstance(number, int):
            raise DescriptorError(owner, f"enum value {name} must be an integer")
        values.append(EnumValue(name, number))
    return values


__all__ = ["DescriptorError", "load_descriptor_dump", "parse_descriptor_dump"]
