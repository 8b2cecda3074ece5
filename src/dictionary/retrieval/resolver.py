"""Cascading index name resolution.

Indices are provisioned at decreasing specificity::

    menu                      (global)
    menu_en                   (per language)
    menu_en_11                (per language and client)
    menu_en_11_102            (... and role)
    menu_en_11_102_100        (... and user)

A name is built by appending scope segments in that fixed order. A segment is
only appended while every shallower segment is present, so asking for a deeper
level than the context supports yields the deepest name that can be built.
"""

from dictionary.retrieval.constants import INDEX_SEPARATOR
from dictionary.retrieval.types import ScopeLevel, TenantContext


def resolve_index(
    base: str,
    context: TenantContext | None = None,
    level: ScopeLevel = ScopeLevel.USER,
) -> str:
    """Resolve the index name for ``base`` at up to ``level`` specificity.

    Args:
        base: Entity base name (e.g. ``menu``).
        context: Tenant scope. ``None`` resolves to the global index.
        level: Deepest level requested.

    Returns:
        Lower-cased index name for the deepest resolvable level not beyond
        ``level``.
    """
    parts = [base]
    if context is not None:
        for depth, value in enumerate(context.segments(), start=1):
            if depth > level or value is None:
                break
            parts.append(value)
    return INDEX_SEPARATOR.join(parts).lower()


def resolved_level(context: TenantContext | None) -> ScopeLevel:
    """Deepest scope level that ``context`` can fully build."""
    depth = 0
    if context is not None:
        for value in context.segments():
            if value is None:
                break
            depth += 1
    return ScopeLevel(depth)


def candidate_indices(base: str, context: TenantContext | None = None) -> list[str]:
    """List index names to try for a query, most specific first.

    Args:
        base: Entity base name.
        context: Tenant scope of the query.

    Returns:
        Distinct index names from the deepest resolvable level down to the
        global index.
    """
    deepest = resolved_level(context)
    return [
        resolve_index(base, context, ScopeLevel(depth)) for depth in range(deepest, -1, -1)
    ]
