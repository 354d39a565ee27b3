from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, TypeVar

from contract_radar.services.contracts.contract_models import PageResult, PaginationInfo

logger = logging.getLogger("contract_radar.paginator")

T = TypeVar("T")

PAGE_SIZE_OPTIONS = (10, 25, 50, 100)


def total_pages_for(total_items: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return math.ceil(total_items / page_size) if total_items else 0


def paginate(
    items: Sequence[T],
    page: int,
    page_size: int,
    *,
    log: Optional[logging.Logger] = None,
) -> PageResult[T]:
    """
    Slice one page out of an already ordered sequence.

    Half-open range [(page-1)*page_size, page*page_size). Out-of-range pages
    give an empty page, never an error. Callers changing page_size should
    reset page to 1.
    """
    total_items = len(items)
    total_pages = total_pages_for(total_items, page_size)

    data: List[T] = []
    if page >= 1:
        start = (page - 1) * page_size
        data = list(items[start:start + page_size])

    (log or logger).debug(
        "page_sliced page=%s page_size=%s total_items=%s total_pages=%s returned=%s",
        page, page_size, total_items, total_pages, len(data),
    )

    return PageResult(
        data=data,
        pagination=PaginationInfo(page=page, page_size=page_size, total_items=total_items),
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
        total_pages=total_pages,
    )
