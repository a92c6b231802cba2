"""Qualified names and type expressions for descriptors."""

from .names import QualifiedNameResolver
from .mapper import CompositeType, TypeMapper

__all__ = ["CompositeType", "QualifiedNameResolver", "TypeMapper"]
