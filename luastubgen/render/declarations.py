"""Pure renderers turning declaration records into annotation text."""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

from ..constants import NO_NAMESPACE, ROOT_TABLE, VOID
from ..models import Access
from ..records import (
    ClassDeclaration,
    Constructor,
    Declaration,
    EnumDeclaration,
    Field,
    GenericMethod,
    MethodGroup,
    Operator,
)
from .callables import (
    format_generic_annotations,
    format_overload,
    format_param_annotations,
    format_parameter_list,
)

_INDENT = " " * 4


def render_declaration(declaration: Declaration) -> str:
    match declaration:
        case EnumDeclaration():
            return render_enum(declaration)
        case ClassDeclaration():
            return render_class(declaration)
    raise TypeError(f"Unsupported declaration: {type(declaration).__name__}")


def render_enum(declaration: EnumDeclaration) -> str:
    members = ",\n".join(f"{_INDENT}{member.name} = {member.value}" for member in declaration.members)
    return f"---@enum {declaration.name}\n{ROOT_TABLE}.{declaration.name} = {{\n{members}\n}}\n"


def render_class(declaration: ClassDeclaration) -> str:
    header = f"---@class {declaration.name}"
    if declaration.base_types:
        header += f": {', '.join(declaration.base_types)}"

    lines: List[str] = [header]
    lines.extend(render_field(field) for field in declaration.fields)
    lines.extend(render_operator(operator) for operator in declaration.operators)
    lines.append(f"{ROOT_TABLE}.{declaration.name} = {{}}")
    lines.append("")
    text = "\n".join(lines) + "\n"

    for method in declaration.methods:
        text += render_method(method) + "\n\n"
    if declaration.constructor is not None:
        text += render_constructor(declaration.constructor) + "\n"
    return text


def render_field(field: Field) -> str:
    if field.access.requires_annotation:
        return f"---@field {field.access.value} {field.name} {field.type}"
    return f"---@field {field.name} {field.type}"


def render_operator(operator: Operator) -> str:
    if operator.binary:
        return f"---@operator {operator.name}({operator.operand_type}): {operator.result_type}"
    return f"---@operator {operator.name}: {operator.result_type}"


def render_method(method: Union[MethodGroup, GenericMethod]) -> str:
    lines: List[str] = []
    lines.extend(_access_lines(method.access))
    if method.is_async:
        lines.append("---@async")

    match method:
        case GenericMethod(generic_parameters=generic_parameters):
            lines.extend(format_generic_annotations(generic_parameters))
        case MethodGroup(overloads=overloads):
            lines.extend(format_overload(overload) for overload in overloads)

    lines.extend(format_param_annotations(method.parameters))
    if method.return_type != VOID:
        lines.append(f"---@return {method.return_type}")

    call = ":" if method.is_instance else "."
    params = format_parameter_list(method.parameters)
    lines.append(f"function {ROOT_TABLE}.{method.class_name}{call}{method.name}({params}) end")
    return "\n".join(lines)


def render_constructor(constructor: Constructor) -> str:
    lines: List[str] = []
    lines.extend(_access_lines(constructor.access))
    lines.extend(format_overload(overload) for overload in constructor.overloads)
    lines.extend(format_param_annotations(constructor.parameters))
    lines.append(f"---@return {constructor.class_name}")
    params = format_parameter_list(constructor.parameters)
    lines.append(f"function {ROOT_TABLE}.{constructor.class_name}({params}) end")
    return "\n".join(lines)


def render_namespace_block(namespace: Optional[str], texts: Iterable[str]) -> str:
    """Header plus every declaration of one namespace, each preceded by a blank line."""
    header = f"---Namespace: {namespace or NO_NAMESPACE}\n"
    return header + "".join(f"\n{text}" for text in texts)


def _access_lines(access: Access) -> List[str]:
    if access.requires_annotation:
        return [f"---@{access.value}"]
    return []


__all__ = [
    "render_class",
    "render_constructor",
    "render_declaration",
    "render_enum",
    "render_field",
    "render_method",
    "render_namespace_block",
    "render_operator",
]
