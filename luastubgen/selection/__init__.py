"""Type selection over descriptor dumps."""

from .filters import SELECT_ALL, is_candidate, normalise_filters, select_types
from .wildcard import matches

__all__ = ["SELECT_ALL", "is_candidate", "matches", "normalise_filters", "select_types"]
