from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from contract_radar.core.config import settings
from contract_radar.core.errors import ContractsApiError
from contract_radar.schemas.dashboard_view_model import (
    ApiErrorView,
    DashboardView,
    to_dashboard_view,
)
from contract_radar.services.contracts.contract_dashboard_service import ContractDashboardService
from contract_radar.services.contracts.contract_models import (
    ContractAnalysisResult,
    FilterSpec,
    RiskLevel,
    SortDirection,
    SortField,
    SortSpec,
)


router = APIRouter()


def _service(request: Request) -> ContractDashboardService:
    state = request.app.state
    return ContractDashboardService(state.api, state.fallback)


@router.get("/contracts", response_model=DashboardView)
async def list_contracts(
    request: Request,
    fecha_desde: Optional[date] = None,
    fecha_hasta: Optional[date] = None,
    valor_minimo: Optional[float] = None,
    valor_maximo: Optional[float] = None,
    nombre_contrato: Optional[str] = None,
    id_contrato: Optional[str] = None,
    nivel_riesgo: Optional[List[RiskLevel]] = Query(None),
    sort_field: Optional[SortField] = None,
    sort_direction: SortDirection = SortDirection.ASC,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    limit: Optional[int] = None,
):
    """
    Dashboard page

    - server-side filters go to the contracts API
    - nivel_riesgo is applied locally
    - API failures -> 502 with the classified error (no partial table)
    """
    filters = FilterSpec(
        date_from=fecha_desde,
        date_to=fecha_hasta,
        min_amount=valor_minimo,
        max_amount=valor_maximo,
        name=nombre_contrato,
        contract_id=id_contrato,
        risk_levels=frozenset(nivel_riesgo) if nivel_riesgo else None,
    )
    sort = SortSpec(field=sort_field, direction=sort_direction)

    service = _service(request)
    try:
        snapshot = await service.load_dashboard(filters, sort, page_size=page_size, limit=limit)
    except ContractsApiError as e:
        raise HTTPException(status_code=502, detail=ApiErrorView(**e.to_dict()).model_dump())

    if page != 1:
        snapshot = service.change_page(snapshot, page)

    return to_dashboard_view(snapshot)


@router.get("/contracts/{contract_id}/analysis", response_model=ContractAnalysisResult)
async def get_contract_analysis(request: Request, contract_id: str):
    """Contract + AI analysis; example data (is_fallback=true) when the API fails."""
    return await _service(request).get_contract_analysis(contract_id)
