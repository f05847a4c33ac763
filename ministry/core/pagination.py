"""List Pagination - clamps caller-supplied limit/offset into the supported window.

Invariants:
    - limit is always within [1, MAX_LIST_LIMIT]; missing or non-positive becomes DEFAULT_LIST_LIMIT
    - offset is never negative; missing or negative becomes 0
"""

from ministry.core.domain_types import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT


def clamp_pagination(
    limit: int | None, offset: int | None,
) -> tuple[int, int]:
    """Return (limit, offset) clamped. Pure."""
    if limit is None or limit <= 0:
        limit = DEFAULT_LIST_LIMIT
    if limit > MAX_LIST_LIMIT:
        limit = MAX_LIST_LIMIT
    if offset is None or offset < 0:
        offset = 0
    return limit, offset
