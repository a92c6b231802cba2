"""Member collection for type declarations."""

from .members import MemberCollector
from .parameters import escape_keyword, synthesize_parameter, synthesize_parameters

__all__ = [
    "MemberCollector",
    "escape_keyword",
    "synthesize_parameter",
    "synthesize_parameters",
]
