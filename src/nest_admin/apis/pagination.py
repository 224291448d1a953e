import re
from dataclasses import dataclass
from fastapi import Query
from typing import Annotated

from nest_admin.config import app_cfg


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def coerce_positive_int(raw: str | None, default: int) -> int:
    """
    Parse the leading integer of a query value, falling back to ``default``.

    Trailing junk is ignored (``"2abc"`` and ``"2.5"`` read as 2); values
    with no leading digits or below 1 give ``default``.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    value = int(match.group(1))
    return value if value >= 1 else default


def normalize_search(raw: str | None) -> str | None:
    """Blank search terms mean "no filter"."""
    if raw is None:
        return None
    trimmed = raw.strip()
    return trimmed or None


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(default_limit: int):
    """
    Build a dependency that reads ``page`` and ``limit`` leniently.

    Malformed values are coerced to defaults rather than rejected: page
    falls back to 1, limit to ``default_limit``; limit is capped at
    MAX_PAGE_LIMIT.
    """
    def dependency(
        page: Annotated[str | None, Query(description="1-based page number (default 1)")] = None,
        limit: Annotated[str | None, Query(description=f"Rows per page (default {default_limit}, capped at {app_cfg.MAX_PAGE_LIMIT})")] = None,
    ) -> PageParams:
        return PageParams(
            page=coerce_positive_int(page, 1),
            limit=min(coerce_positive_int(limit, default_limit), app_cfg.MAX_PAGE_LIMIT),
        )

    return dependency
