from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from contract_radar.services.contracts.contract_models import (
    Contract,
    DashboardSnapshot,
    DashboardStats,
    PaginationInfo,
    RiskLevel,
    SortSpec,
)


class AppliedFilters(BaseModel):
    query: str = ""
    risk_levels: List[RiskLevel] = Field(default_factory=list)


class DashboardView(BaseModel):
    """
    One dashboard page as served to the presentation layer.

    The working set itself is not sent, only the requested page.
    """
    contracts: List[Contract]
    pagination: PaginationInfo
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    stats: DashboardStats
    sort: SortSpec
    filters: AppliedFilters
    rejected_count: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ApiErrorView(BaseModel):
    kind: str
    message: str
    url: Optional[str] = None
    retryable: bool = True


def to_dashboard_view(snapshot: DashboardSnapshot) -> DashboardView:
    page = snapshot.page
    levels = sorted(snapshot.filters.risk_levels or [], key=lambda r: r.value)
    return DashboardView(
        contracts=page.data,
        pagination=page.pagination,
        total_pages=page.total_pages,
        has_next_page=page.has_next_page,
        has_prev_page=page.has_prev_page,
        stats=snapshot.stats,
        sort=snapshot.sort,
        filters=AppliedFilters(query=snapshot.query, risk_levels=levels),
        rejected_count=snapshot.rejected_count,
        metadata=snapshot.summary.metadata,
    )
