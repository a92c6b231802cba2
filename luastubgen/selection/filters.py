"""Selection of declarable types from a descriptor dump."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Sequence

from ..logging import get_logger
from ..mapping.helpers import is_compiler_generated
from ..mapping.names import QualifiedNameResolver
from ..models import TypeDescriptor
from .wildcard import matches

_logger = get_logger("selection")

SELECT_ALL = "*"


def normalise_filters(filters: Sequence[str]) -> List[str]:
    """Drop duplicate filters (warning once per duplicate), keeping first-seen order."""
    counts = Counter(filters)
    duplicates = [item for item, count in counts.items() if count > 1]
    if duplicates:
        _logger.warning("Detected duplicate type filters:")
        for item in duplicates:
            _logger.warning('    "%s"', item)
        _logger.warning("Removed duplicates!")
    result: List[str] = []
    for item in filters:
        if item not in result:
            result.append(item)
    return result


def is_candidate(type_: TypeDescriptor) -> bool:
    if not type_.is_declarable or type_.is_external:
        return False
    if type_.is_generic or type_.is_special_name or type_.is_generated_code:
        return False
    return not is_compiler_generated(type_)


def select_types(
    types: Iterable[TypeDescriptor],
    filters: Sequence[str],
    resolver: QualifiedNameResolver,
) -> List[TypeDescriptor]:
    """Return candidate types matching any filter, in input order."""
    candidates = [type_ for type_ in types if is_candidate(type_)]
    active = normalise_filters(filters)
    if SELECT_ALL in active:
        return candidates

    selected: List[TypeDescriptor] = []
    for type_ in candidates:
        qualified_name = resolver.resolve(type_)
        for item in active:
            if "*" in item:
                hit = matches(qualified_name, item)
            else:
                hit = item in (type_.identity, qualified_name)
            if hit:
                selected.append(type_)
                break
    _logger.debug("Selected %d of %d candidate types", len(selected), len(candidates))
    return selected


__all__ = ["SELECT_ALL", "is_candidate", "normalise_filters", "select_types"]
