"""Parameter synthesis shared by member collection and delegate mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from ..constants import KEYWORD_ESCAPE, LUA_KEYWORDS
from ..models import MethodDescriptor, ParameterDescriptor
from ..records import Parameter

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..mapping.mapper import TypeMapper


def escape_keyword(name: str) -> str:
    if name.lower() in LUA_KEYWORDS:
        return KEYWORD_ESCAPE.format(name=name)
    return name


def synthesize_parameter(
    parameter: ParameterDescriptor, mapper: "TypeMapper", *, consider_precedence: bool = False
) -> Parameter:
    param_type = parameter.type
    if parameter.is_variadic and param_type.element_type is not None and param_type.is_array:
        param_type = param_type.element_type
    return Parameter(
        name=escape_keyword(parameter.name or "arg"),
        type=mapper.map_type(param_type, consider_precedence=consider_precedence),
        is_optional=parameter.is_optional,
        is_variadic=parameter.is_variadic,
    )


def synthesize_parameters(
    method: MethodDescriptor, mapper: "TypeMapper", *, consider_precedence: bool = False
) -> Tuple[Parameter, ...]:
    return tuple(
        synthesize_parameter(param, mapper, consider_precedence=consider_precedence)
        for param in method.parameters
    )


__all__ = ["escape_keyword", "synthesize_parameter", "synthesize_parameters"]
