"""Canonical dotted names for type descriptors."""

from __future__ import annotations

from typing import List

from ..constants import OPAQUE_TOKEN
from ..models import TypeDescriptor
from ..stores import RunCache
from .helpers import declaring_chain


class QualifiedNameResolver:
    """Computes ``Namespace.Outer.Inner.Name`` for a descriptor, memoized per identity."""

    def __init__(self, cache: RunCache[str] | None = None) -> None:
        self._cache: RunCache[str] = cache if cache is not None else RunCache("qualified-name")

    def resolve(self, type_: TypeDescriptor) -> str:
        return self._cache.get_or_compute(type_.identity, lambda: self._compute(type_))

    __call__ = resolve

    @staticmethod
    def _compute(type_: TypeDescriptor) -> str:
        # Generic types have no spelling in the annotation language.
        if type_.is_generic:
            return OPAQUE_TOKEN

        names: List[str] = []
        if type_.namespace:
            names.extend(type_.namespace.split("."))
        names.extend(decl.name for decl in declaring_chain(type_))
        names.append(type_.name)
        return ".".join(names)


__all__ = ["QualifiedNameResolver"]
