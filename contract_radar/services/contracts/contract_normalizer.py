from __future__ import annotations

import datetime as dt
import logging
import math
import re
from typing import Any, Dict, List, Optional

from contract_radar.services.contracts.contract_models import (
    Contract,
    ContractAnalysis,
    RiskLevel,
    ShapValue,
)

logger = logging.getLogger("contract_radar.normalizer")


RISK_LABELS = {
    "Alto": RiskLevel.HIGH,
    "Medio": RiskLevel.MEDIUM,
    "Bajo": RiskLevel.LOW,
}

# Labels outside RISK_LABELS are downgraded to this level instead of being
# rejected. Kept as a single rule so the policy can be changed in one place.
UNRECOGNIZED_RISK_LEVEL = RiskLevel.LOW

_AMOUNT_NOISE = re.compile(r"[^0-9.\-]")
# "1.234.567" / "1.234": dots group thousands, amounts carry no decimals
_THOUSANDS_GROUPED = re.compile(r"-?\d{1,3}(?:\.\d{3})+")


# ---------- scalar helpers ----------

def _to_str(x: Any, default: str = "") -> str:
    if x is None:
        return default
    return str(x).strip()


def _to_float(x: Any, default: float = 0.0) -> float:
    try:
        if x is None or isinstance(x, bool):
            return default
        v = float(x)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) else default


def _parse_dt(x: Any) -> Optional[dt.datetime]:
    if not x:
        return None
    if isinstance(x, dt.datetime):
        return x
    try:
        return dt.datetime.fromisoformat(str(x).strip().replace("Z", "+00:00"))
    except ValueError:
        return None


# ---------- field rules ----------

def normalize_risk_level(label: Any, *, log: Optional[logging.Logger] = None) -> RiskLevel:
    """Alto/Medio/Bajo -> high/medium/low; anything else -> UNRECOGNIZED_RISK_LEVEL."""
    level = RISK_LABELS.get(label) if isinstance(label, str) else None
    if level is not None:
        return level
    (log or logger).warning(
        "risk_label_unrecognized label=%r normalized_to=%s",
        label, UNRECOGNIZED_RISK_LEVEL.value,
    )
    return UNRECOGNIZED_RISK_LEVEL


def strip_amount(raw: str) -> str:
    """Drop everything except digits, '.' and '-' ("$ 1.234.567" -> "1.234.567")."""
    return _AMOUNT_NOISE.sub("", raw)


def parse_amount_value(value: Any) -> Optional[float]:
    """
    Numeric value of a source amount, or None when it cannot be read.

    Numbers pass through. Strings are stripped with strip_amount(); a result
    shaped like thousands groups ("1.234.567") has its dots removed, any
    other result is parsed as a plain decimal ("1234.50" -> 1234.5).
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        v = float(value)
        return v if math.isfinite(v) else None

    if not isinstance(value, str):
        return None

    cleaned = strip_amount(value)
    if _THOUSANDS_GROUPED.fullmatch(cleaned):
        cleaned = cleaned.replace(".", "")

    try:
        v = float(cleaned)
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def parse_amount(value: Any) -> float:
    """Source amount -> non-negative float; unparseable input becomes 0."""
    v = parse_amount_value(value)
    if v is None or v < 0:
        return 0.0
    return v


def parse_calendar_date(value: Any) -> Optional[dt.date]:
    """ISO-like date/datetime string -> date. Absent or unreadable -> None."""
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    parsed = _parse_dt(value)
    if parsed is not None:
        return parsed.date()

    try:
        return dt.date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        logger.warning("date_unparseable value=%r", value)
        return None


# ---------- records ----------

def normalize_contract(record: Dict[str, Any], *, log: Optional[logging.Logger] = None) -> Contract:
    """List wire record (Contrato/Entidad/Monto/...) -> Contract."""
    contrato = record.get("Contrato") or {}
    return Contract(
        id=_to_str(contrato.get("Codigo")),
        name=_to_str(contrato.get("Descripcion")),
        entity=_to_str(record.get("Entidad")),
        amount=parse_amount(record.get("Monto")),
        date=parse_calendar_date(record.get("FechaInicio")),
        risk_level=normalize_risk_level(record.get("NivelRiesgo"), log=log),
        anomaly_probability=_to_float(record.get("Anomalia")),
    )


def normalize_detail_contract(record: Dict[str, Any], *, log: Optional[logging.Logger] = None) -> Contract:
    """Detail wire record (codigo/entidad/monto/...) -> Contract."""
    return Contract(
        id=_to_str(record.get("codigo")),
        name=_to_str(record.get("descripcion")),
        entity=_to_str(record.get("entidad")),
        amount=parse_amount(record.get("monto")),
        date=parse_calendar_date(record.get("fechaInicio")),
        risk_level=normalize_risk_level(record.get("nivelRiesgo"), log=log),
        anomaly_probability=_to_float(record.get("anomalia")),
    )


def normalize_contracts(
    records: List[Dict[str, Any]],
    *,
    log: Optional[logging.Logger] = None,
) -> List[Contract]:
    log = log or logger
    contracts = [normalize_contract(r, log=log) for r in records]
    log.info("records_normalized count=%s", len(contracts))
    return contracts


def _to_str_list(x: Any) -> List[str]:
    if not isinstance(x, list):
        return []
    return [str(v) for v in x if v is not None]


def normalize_analysis(record: Dict[str, Any]) -> ContractAnalysis:
    """
    Analysis wire record -> ContractAnalysis.

    SHAP attributions are copied as-is after renaming
    (actualValue -> actual_value); nothing is recomputed.
    """
    shap_values: List[ShapValue] = []
    for s in record.get("shapValues") or []:
        if not isinstance(s, dict):
            continue
        shap_values.append(
            ShapValue(
                variable=_to_str(s.get("variable")),
                value=_to_float(s.get("value")),
                description=_to_str(s.get("description")),
                actual_value=s.get("actualValue"),
            )
        )

    return ContractAnalysis(
        contract_id=_to_str(record.get("contractId")),
        executive_summary=_to_str(record.get("resumenEjecutivo")),
        main_factors=_to_str_list(record.get("factoresPrincipales")),
        recommendations=_to_str_list(record.get("recomendaciones")),
        shap_values=shap_values,
        base_probability=_to_float(record.get("probabilidadBase")),
        confidence=_to_float(record.get("confianza")),
        analyzed_at=_parse_dt(record.get("fechaAnalisis")),
    )
