from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from contract_radar.services.contracts.contract_normalizer import (
    RISK_LABELS,
    parse_amount_value,
)


logger = logging.getLogger("contract_radar.validator")


@dataclass
class RecordValidation:
    ok: bool
    defects: List[str] = field(default_factory=list)


@dataclass
class EnvelopeCheck:
    """
    Tagged result of the list-endpoint shape check.

    ok=True  -> payload holds the decoded body, warnings may be non-empty
    ok=False -> reasons explain why the body cannot be used
    """
    ok: bool
    payload: Optional[Dict[str, Any]] = None
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(x)


def _amount_defect(monto: Any) -> Optional[str]:
    if monto is None:
        return "missing amount (Monto)"
    value = parse_amount_value(monto)
    if value is None:
        return f"non-numeric amount (Monto={monto!r})"
    if value < 0:
        return f"negative amount (Monto={monto!r})"
    return None


def _anomaly_defect(anomaly: Any, key: str) -> Optional[str]:
    if anomaly is None:
        return f"missing anomaly probability ({key})"
    if not _is_number(anomaly):
        return f"non-numeric anomaly probability ({key}={anomaly!r})"
    if not 0 <= anomaly <= 100:
        return f"anomaly probability out of range [0,100] ({key}={anomaly!r})"
    return None


def validate_raw_contract(record: Any) -> RecordValidation:
    """
    Structural check of one list record (wire shape) before normalization.

    Shape:
    {
      "Contrato": {"Codigo": ..., "Descripcion": ...},
      "Entidad": ..., "Monto": str|number, "FechaInicio": str?,
      "NivelRiesgo": "Alto"|"Medio"|"Bajo", "Anomalia": number
    }
    """
    if not isinstance(record, dict):
        return RecordValidation(ok=False, defects=["record must be object"])

    defects: List[str] = []

    contrato = record.get("Contrato")
    if not isinstance(contrato, dict) or not contrato.get("Codigo"):
        defects.append("missing contract code (Contrato.Codigo)")

    if not record.get("Entidad"):
        defects.append("missing entity name (Entidad)")

    risk = record.get("NivelRiesgo")
    if not risk:
        defects.append("missing risk level (NivelRiesgo)")
    elif not isinstance(risk, str) or risk not in RISK_LABELS:
        defects.append(f"invalid risk level (NivelRiesgo={risk!r})")

    amount_defect = _amount_defect(record.get("Monto"))
    if amount_defect:
        defects.append(amount_defect)

    anomaly_defect = _anomaly_defect(record.get("Anomalia"), "Anomalia")
    if anomaly_defect:
        defects.append(anomaly_defect)

    return RecordValidation(ok=not defects, defects=defects)


def validate_detail_contract(record: Dict[str, Any]) -> RecordValidation:
    """
    Range check of the detail-endpoint contract (lower-case keys).

    Labels and amounts are normalized leniently on this path; only values
    the Contract model cannot represent are defects.
    """
    defects: List[str] = []

    anomaly_defect = _anomaly_defect(record.get("anomalia"), "anomalia")
    if anomaly_defect:
        defects.append(anomaly_defect)

    return RecordValidation(ok=not defects, defects=defects)


def check_list_envelope(body: Any) -> EnvelopeCheck:
    """
    Shape check of the GET /contratos body at the client boundary.

    Only a missing or non-list `contratos` makes the body unusable; missing
    metadata or non-numeric rollups are reported as warnings.
    """
    if not isinstance(body, dict):
        return EnvelopeCheck(ok=False, reasons=["response body must be a JSON object"])

    contratos = body.get("contratos")
    if not isinstance(contratos, list):
        return EnvelopeCheck(ok=False, reasons=["missing contratos array"])

    warnings: List[str] = []
    if not isinstance(body.get("metadata"), dict):
        warnings.append("missing metadata")
    for key in ("totalContratosAnalizados", "contratosAltoRiesgo", "montoTotalCOP"):
        if not _is_number(body.get(key)):
            warnings.append(f"{key} is not a number")

    return EnvelopeCheck(ok=True, payload=body, warnings=warnings)


def partition_records(
    records: List[Any],
    *,
    log: Optional[logging.Logger] = None,
) -> tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Split raw records into (valid, rejected).

    Rejected entries are {"index", "code", "defects"}; they are logged as
    diagnostics and never raised.
    """
    log = log or logger
    valid: List[Dict[str, Any]] = []
    rejected: List[Dict[str, Any]] = []

    for i, record in enumerate(records):
        result = validate_raw_contract(record)
        if result.ok:
            valid.append(record)
            continue

        code = None
        if isinstance(record, dict) and isinstance(record.get("Contrato"), dict):
            raw_code = record["Contrato"].get("Codigo")
            code = str(raw_code) if raw_code is not None else None
        rejected.append({"index": i, "code": code, "defects": result.defects})
        log.warning(
            "record_dropped index=%s code=%s defects=%s",
            i, code, "; ".join(result.defects),
        )

    log.info(
        "records_validated received=%s valid=%s dropped=%s",
        len(records), len(valid), len(rejected),
    )
    return valid, rejected
