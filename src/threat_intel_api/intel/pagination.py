# Intel Module - Pagination
#
# Converts a (page, page-size) request into a storage-level
# (limit, offset) window, and a result count into page metadata.
# Inputs are validated by the API layer before they get here.

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class PageWindow:
    """Storage-level LIMIT/OFFSET pair."""

    limit: int
    offset: int


@dataclass(frozen=True)
class PaginationMeta:
    """Page metadata returned alongside a page of results."""

    page: int
    limit: int
    total: int
    total_pages: int

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["totalPages"] = d.pop("total_pages")
        return d


def to_offset(page: int, limit: int) -> PageWindow:
    """Translate a 1-based page number into a LIMIT/OFFSET window."""
    return PageWindow(limit=limit, offset=(page - 1) * limit)


def to_meta(page: int, limit: int, total: int) -> PaginationMeta:
    """Build page metadata. Zero results means zero pages."""
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit),
    )
