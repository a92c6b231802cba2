"""Fail-safe placeholders for types whose translation failed."""

from __future__ import annotations

from typing import Optional

from .records import RenderedDeclaration

_MAX_REASON_LENGTH = 200


def build_failure_note(identity: str, reason: Optional[str] = None) -> str:
    """Return the comment line written in place of a failed declaration."""
    cleaned = _format_reason(reason) or "unknown error"
    return f"---Translation failed for {identity}: {cleaned}\n"


def build_failed_declaration(
    identity: str, namespace: Optional[str], reason: Optional[str] = None
) -> RenderedDeclaration:
    """Wrap a failure note so it keeps the failed type's slot in its namespace file."""
    return RenderedDeclaration(
        identity=identity,
        qualified_name=identity,
        namespace=namespace,
        text=build_failure_note(identity, reason),
        failed=True,
    )


def _format_reason(reason: Optional[str]) -> Optional[str]:
    if not reason:
        return None
    cleaned = " ".join(reason.strip().split())
    if not cleaned:
        return None
    return cleaned[:_MAX_REASON_LENGTH] + ("…" if len(cleaned) > _MAX_REASON_LENGTH else "")


__all__ = ["build_failed_declaration", "build_failure_note"]
