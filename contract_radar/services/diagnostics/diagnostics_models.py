from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from contract_radar.services.contracts.contract_models import HealthStatus


class DataAudit(BaseModel):
    contracts: int
    valid_contracts: int
    risk_levels: Dict[str, int] = Field(default_factory=dict)
    issues: List[str] = Field(default_factory=list)


class EnvelopeAudit(BaseModel):
    is_valid: bool
    issues: List[str] = Field(default_factory=list)


class EnvironmentInfo(BaseModel):
    app_env: str
    api_base_url: str


class DashboardDiagnostics(BaseModel):
    timestamp: datetime
    environment: EnvironmentInfo
    api_status: HealthStatus
    data_status: DataAudit
    envelope_status: Optional[EnvelopeAudit] = None
