"""Text fragments shared by every callable declaration."""

from __future__ import annotations

from typing import List, Sequence

from ..constants import VOID
from ..records import GenericParameter, OverloadSignature, Parameter


def format_parameter_list(parameters: Sequence[Parameter], *, for_annotation: bool = False) -> str:
    """Render ``a, b, ...`` for declarations or ``a: T, b?: U, ...: V`` for annotations."""
    parts: List[str] = []
    for param in parameters:
        if for_annotation:
            if param.is_variadic:
                parts.append(f"...: {param.type}")
            elif param.is_optional:
                parts.append(f"{param.name}?: {param.type}")
            else:
                parts.append(f"{param.name}: {param.type}")
        else:
            parts.append("..." if param.is_variadic else param.name)
    return ", ".join(parts)


def format_param_annotations(parameters: Sequence[Parameter]) -> List[str]:
    lines: List[str] = []
    for param in parameters:
        if param.is_optional:
            lines.append(f"---@param {param.name}? {param.type}")
        elif param.is_variadic:
            lines.append(f"---@param ... {param.type}")
        else:
            lines.append(f"---@param {param.name} {param.type}")
    return lines


def format_generic_annotations(generic_parameters: Sequence[GenericParameter]) -> List[str]:
    return [
        f"---@generic {param.name} : {param.constraint}"
        if param.constraint is not None
        else f"---@generic {param.name}"
        for param in generic_parameters
    ]


def format_function_type(parameters: Sequence[Parameter], return_type: str) -> str:
    """``fun(a: T): R`` as used for delegate types."""
    params = format_parameter_list(parameters, for_annotation=True)
    returns = "" if return_type == VOID else f": {return_type}"
    return f"fun({params}){returns}"


def format_overload(overload: OverloadSignature) -> str:
    parts: List[str] = []
    if overload.is_instance:
        parts.append("self: self")
    params = format_parameter_list(overload.parameters, for_annotation=True)
    if params:
        parts.append(params)
    if overload.return_type == VOID:
        returns = ""
    else:
        returns = f": {overload.return_type}"
    return f"---@overload fun({', '.join(parts)}){returns}"


__all__ = [
    "format_function_type",
    "format_generic_annotations",
    "format_overload",
    "format_param_annotations",
    "format_parameter_list",
]
