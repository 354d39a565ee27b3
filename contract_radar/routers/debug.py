import logging

from fastapi import APIRouter, Request

from contract_radar.core.errors import ContractsApiError
from contract_radar.services.contracts.contract_dashboard_service import ContractDashboardService
from contract_radar.services.diagnostics.diagnostics_models import DashboardDiagnostics
from contract_radar.services.diagnostics.diagnostics_service import DiagnosticsService

logger = logging.getLogger("contract_radar.debug")

router = APIRouter()


@router.get("/diagnostics", response_model=DashboardDiagnostics)
async def dashboard_diagnostics(request: Request):
    """
    DEBUG endpoint
    - probe the contracts API
    - audit the unfiltered list (records + envelope)
    - no state kept between calls
    """
    api = request.app.state.api
    contracts = []
    body = None
    try:
        result = await ContractDashboardService(api, request.app.state.fallback).fetch_contracts()
        contracts, body = result.contracts, result.raw_body
    except ContractsApiError as e:
        logger.warning("diagnostics_list_unavailable kind=%s url=%s", e.kind, e.url)

    return await DiagnosticsService(api).run(contracts, body)
