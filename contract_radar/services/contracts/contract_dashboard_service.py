from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from contract_radar.core.config import settings
from contract_radar.core.errors import ContractsApiError, MalformedResponseError
from contract_radar.core.logging import get_logger
from contract_radar.repositories.contracts_api_repo import ContractsApiRepository
from contract_radar.services.contracts.contract_models import (
    Contract,
    ContractAnalysis,
    ContractAnalysisResult,
    ContractListResult,
    DashboardSnapshot,
    FilterSpec,
    HealthStatus,
    RejectedRecord,
    SortSpec,
)
from contract_radar.services.contracts.contract_normalizer import (
    normalize_analysis,
    normalize_contracts,
    normalize_detail_contract,
)
from contract_radar.services.contracts.contract_sorter import sort_contracts
from contract_radar.services.contracts.contract_validator import (
    partition_records,
    validate_detail_contract,
)
from contract_radar.services.contracts.fallback_provider import (
    FallbackProvider,
    get_fallback_provider,
)
from contract_radar.services.contracts.paginator import paginate
from contract_radar.services.contracts.risk_filter import filter_by_risk_levels
from contract_radar.services.contracts.stats_aggregator import compute_dashboard_stats


class ContractDashboardService:
    """
    Contract-data pipeline for the dashboard and the analysis view

    List path:
      query -> API -> validate (drop bad records) -> normalize
      -> risk filter -> sort -> paginate, stats over the filtered set
      API failures propagate to the caller.

    Detail path:
      API -> check -> normalize, any API failure or malformed pair
      -> fallback pair.

    Every run works on its own copies; the caller keeps the returned
    DashboardSnapshot and passes it back for page changes.
    """

    def __init__(
        self,
        api: ContractsApiRepository,
        fallback: Optional[FallbackProvider] = None,
        *,
        log: Optional[logging.Logger] = None,
    ):
        self.api = api
        self._fallback = fallback
        self.log = log or get_logger("dashboard")

    @property
    def fallback(self) -> FallbackProvider:
        if self._fallback is None:
            self._fallback = get_fallback_provider()
        return self._fallback

    # ---------- list ----------

    async def fetch_contracts(
        self,
        filters: Optional[FilterSpec] = None,
        limit: Optional[int] = None,
    ) -> ContractListResult:
        payload = await self.api.list_contracts(filters, limit)

        valid, rejected = partition_records(payload.records, log=get_logger("validator"))
        contracts = normalize_contracts(valid, log=get_logger("normalizer"))

        return ContractListResult(
            contracts=contracts,
            summary=payload.summary,
            rejected=[RejectedRecord(**r) for r in rejected],
            query=payload.query,
            raw_body=payload.body,
        )

    async def load_dashboard(
        self,
        filters: Optional[FilterSpec] = None,
        sort: Optional[SortSpec] = None,
        page_size: int = settings.DEFAULT_PAGE_SIZE,
        limit: Optional[int] = None,
    ) -> DashboardSnapshot:
        """Full run (filters, sort or page size changed). Starts at page 1."""
        filters = filters or FilterSpec()
        sort = sort or SortSpec()

        result = await self.fetch_contracts(filters, limit)

        working_set = filter_by_risk_levels(
            result.contracts, filters.risk_levels, log=get_logger("filter")
        )
        stats = compute_dashboard_stats(working_set, result.summary)
        ordered = sort_contracts(working_set, sort.field, sort.direction, log=get_logger("sorter"))
        page = paginate(ordered, 1, page_size, log=get_logger("paginator"))

        self.log.info(
            "dashboard_loaded query=%s received=%s dropped=%s working_set=%s total_pages=%s",
            result.query or "-",
            len(result.contracts) + len(result.rejected),
            len(result.rejected),
            len(working_set),
            page.total_pages,
        )

        return DashboardSnapshot(
            filters=filters,
            sort=sort,
            working_set=working_set,
            summary=result.summary,
            stats=stats,
            page=page,
            rejected_count=len(result.rejected),
            query=result.query,
        )

    def change_page(self, snapshot: DashboardSnapshot, page: int) -> DashboardSnapshot:
        """Page-number change: re-sort and slice the held working set, no API call."""
        ordered = sort_contracts(
            snapshot.working_set, snapshot.sort.field, snapshot.sort.direction,
            log=get_logger("sorter"),
        )
        result = paginate(
            ordered, page, snapshot.page.pagination.page_size, log=get_logger("paginator")
        )
        return snapshot.model_copy(update={"page": result})

    async def change_page_size(self, snapshot: DashboardSnapshot, page_size: int) -> DashboardSnapshot:
        """Page-size change: full run, back to page 1."""
        return await self.load_dashboard(snapshot.filters, snapshot.sort, page_size)

    async def change_sort(self, snapshot: DashboardSnapshot, sort: SortSpec) -> DashboardSnapshot:
        return await self.load_dashboard(
            snapshot.filters, sort, snapshot.page.pagination.page_size
        )

    # ---------- detail ----------

    def _normalize_detail(
        self,
        contract_id: str,
        raw_contract: Dict[str, Any],
        raw_analysis: Dict[str, Any],
    ) -> Tuple[Contract, ContractAnalysis]:
        """Wire pair -> (Contract, ContractAnalysis); bad shapes are malformed responses."""
        url = self.api.analysis_url(contract_id)

        check = validate_detail_contract(raw_contract)
        if not check.ok:
            raise MalformedResponseError(url=url, reasons=check.defects)

        try:
            contract = normalize_detail_contract(raw_contract, log=get_logger("normalizer"))
            analysis = normalize_analysis(raw_analysis)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(
                url=url, reasons=[f"unexpected field shape ({e.__class__.__name__}: {e})"]
            ) from e

        if not analysis.contract_id:
            analysis = analysis.model_copy(update={"contract_id": contract.id or contract_id})
        return contract, analysis

    async def get_contract_analysis(self, contract_id: str) -> ContractAnalysisResult:
        try:
            raw_contract, raw_analysis = await self.api.fetch_analysis(contract_id)
            contract, analysis = self._normalize_detail(contract_id, raw_contract, raw_analysis)
        except ContractsApiError as e:
            self.log.warning(
                "analysis_fallback contract_id=%s kind=%s url=%s",
                contract_id, e.kind, e.url,
            )
            contract, analysis = self.fallback.get_pair(contract_id)
            return ContractAnalysisResult(
                contract=contract,
                analysis=analysis,
                is_fallback=True,
                fallback_reason=e.message,
            )

        self.log.info(
            "analysis_loaded contract_id=%s risk_level=%s shap_values=%s",
            contract.id, contract.risk_level.value, len(analysis.shap_values),
        )
        return ContractAnalysisResult(contract=contract, analysis=analysis)

    # ---------- health ----------

    async def check_health(self) -> HealthStatus:
        return await self.api.check_health()
