from fastapi import APIRouter, Request

from contract_radar.services.contracts.contract_models import HealthStatus

router = APIRouter()


@router.get("", response_model=HealthStatus)
async def contracts_api_health(request: Request):
    return await request.app.state.api.check_health()
