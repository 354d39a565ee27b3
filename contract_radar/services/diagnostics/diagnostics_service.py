from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from contract_radar.core.config import settings
from contract_radar.repositories.contracts_api_repo import ContractsApiRepository
from contract_radar.services.contracts.contract_models import Contract, RiskLevel
from contract_radar.services.contracts.contract_normalizer import RISK_LABELS
from contract_radar.services.diagnostics.diagnostics_models import (
    DashboardDiagnostics,
    DataAudit,
    EnvelopeAudit,
    EnvironmentInfo,
)

logger = logging.getLogger("contract_radar.diagnostics")


def audit_contracts(contracts: List[Contract]) -> DataAudit:
    """Re-check normalized contracts; only valid ones count in the risk distribution."""
    issues: List[str] = []
    risk_levels = {level.value: 0 for level in RiskLevel}
    valid = 0

    for i, c in enumerate(contracts):
        ok = True
        if not c.id:
            issues.append(f"contract {i}: missing id")
            ok = False
        if not c.name:
            issues.append(f"contract {i}: missing name")
            ok = False
        if not c.entity:
            issues.append(f"contract {i}: missing entity")
            ok = False
        if c.amount < 0:
            issues.append(f"contract {i}: invalid amount ({c.amount})")
            ok = False
        if not 0 <= c.anomaly_probability <= 100:
            issues.append(
                f"contract {i}: invalid anomaly probability ({c.anomaly_probability})"
            )
            ok = False

        if ok:
            valid += 1
            risk_levels[c.risk_level.value] += 1

    return DataAudit(
        contracts=len(contracts),
        valid_contracts=valid,
        risk_levels=risk_levels,
        issues=issues,
    )


def audit_list_envelope(data: Any) -> EnvelopeAudit:
    """Full audit of a GET /contratos body, including every record."""
    issues: List[str] = []

    if not data:
        return EnvelopeAudit(is_valid=False, issues=["empty or null response"])
    if not isinstance(data, dict):
        return EnvelopeAudit(is_valid=False, issues=["response is not an object"])

    if not data.get("metadata"):
        issues.append("missing metadata")

    total = data.get("totalContratosAnalizados")
    if not isinstance(total, (int, float)) or isinstance(total, bool):
        issues.append("totalContratosAnalizados is not a number")

    contratos = data.get("contratos")
    if not isinstance(contratos, list):
        issues.append("contratos is not an array")
    else:
        for i, record in enumerate(contratos):
            if not isinstance(record, dict):
                issues.append(f"contract {i}: not an object")
                continue
            contrato = record.get("Contrato")
            if not isinstance(contrato, dict) or not contrato.get("Codigo"):
                issues.append(f"contract {i}: missing Codigo")
            if not record.get("Entidad"):
                issues.append(f"contract {i}: missing Entidad")
            risk = record.get("NivelRiesgo")
            if not isinstance(risk, str) or risk not in RISK_LABELS:
                issues.append(f"contract {i}: invalid NivelRiesgo ({risk})")

    return EnvelopeAudit(is_valid=not issues, issues=issues)


class DiagnosticsService:
    def __init__(self, api: ContractsApiRepository, *, log: Optional[logging.Logger] = None):
        self.api = api
        self.log = log or logger

    async def run(
        self,
        contracts: Optional[List[Contract]] = None,
        body: Optional[Any] = None,
    ) -> DashboardDiagnostics:
        api_status = await self.api.check_health()
        data_status = audit_contracts(contracts or [])
        envelope_status = audit_list_envelope(body) if body is not None else None

        diagnostics = DashboardDiagnostics(
            timestamp=datetime.now(timezone.utc),
            environment=EnvironmentInfo(
                app_env=settings.APP_ENV,
                api_base_url=self.api.base_url,
            ),
            api_status=api_status,
            data_status=data_status,
            envelope_status=envelope_status,
        )

        self.log.info(
            "diagnostics env=%s api_url=%s api_reachable=%s api_error=%s "
            "contracts=%s valid=%s risk_levels=%s",
            diagnostics.environment.app_env,
            diagnostics.environment.api_base_url,
            api_status.reachable,
            api_status.error or "-",
            data_status.contracts,
            data_status.valid_contracts,
            data_status.risk_levels,
        )
        for issue in data_status.issues:
            self.log.warning("diagnostics_issue %s", issue)
        if envelope_status is not None:
            for issue in envelope_status.issues:
                self.log.warning("diagnostics_envelope_issue %s", issue)

        return diagnostics
