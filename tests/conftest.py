import datetime as dt
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from contract_radar.repositories.contracts_api_repo import ContractsApiRepository
from contract_radar.services.contracts.contract_models import Contract, RiskLevel
from contract_radar.services.contracts.fallback_provider import (
    FallbackDataset,
    FallbackProvider,
)

BASE_URL = "http://contracts.test"

_MISSING = object()


def raw_contract(
    code: Any = "C-1",
    *,
    descripcion: str = "Suministro de equipos",
    entidad: Any = "Alcaldía de Prueba",
    monto: Any = "$ 1.000.000",
    fecha: Any = "2024-01-15",
    riesgo: Any = "Alto",
    anomalia: Any = 80,
) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "Contrato": {"Codigo": code, "Descripcion": descripcion},
        "Entidad": entidad,
        "Monto": monto,
        "NivelRiesgo": riesgo,
        "Anomalia": anomalia,
    }
    if fecha is not None:
        record["FechaInicio"] = fecha
    return record


def list_body(
    records: List[Any],
    *,
    total: Any = None,
    high: Any = 0,
    monto_total: Any = 0,
    metadata: Any = _MISSING,
) -> Dict[str, Any]:
    return {
        "totalContratosAnalizados": len(records) if total is None else total,
        "contratosAltoRiesgo": high,
        "montoTotalCOP": monto_total,
        "metadata": {"source": "test"} if metadata is _MISSING else metadata,
        "contratos": records,
    }


def make_contract(
    id: str = "C-1",
    *,
    entity: str = "Entidad",
    amount: float = 0.0,
    date: Optional[dt.date] = None,
    risk_level: RiskLevel = RiskLevel.LOW,
    anomaly_probability: float = 10.0,
    name: str = "Contrato",
) -> Contract:
    return Contract(
        id=id,
        name=name,
        entity=entity,
        amount=amount,
        date=date,
        risk_level=risk_level,
        anomaly_probability=anomaly_probability,
    )


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(), headers={"content-type": "application/json"})


def make_api(handler: Callable[[httpx.Request], Any], **kwargs) -> ContractsApiRepository:
    return ContractsApiRepository(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


def refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


FALLBACK_DATASET = {
    "meta": {"dataset_id": "test"},
    "contracts": [
        raw_contract("FB-1", entidad="Entidad Ejemplo", riesgo="Alto", anomalia=90),
        raw_contract("FB-2", entidad="Otra Entidad", riesgo="Bajo", anomalia=10),
    ],
    "analyses": {
        "FB-1": {
            "contractId": "FB-1",
            "resumenEjecutivo": "Resumen FB-1",
            "factoresPrincipales": ["f1"],
            "recomendaciones": ["r1"],
            "shapValues": [{"variable": "valor", "value": 0.3, "description": "d", "actualValue": 5}],
            "probabilidadBase": 0.1,
            "confianza": 0.9,
            "fechaAnalisis": "2024-06-10T14:30:00Z",
        },
        "FB-2": {
            "contractId": "FB-2",
            "resumenEjecutivo": "Resumen FB-2",
            "factoresPrincipales": [],
            "recomendaciones": [],
            "shapValues": [],
            "probabilidadBase": 0.1,
            "confianza": 0.5,
            "fechaAnalisis": "2024-06-11T10:00:00Z",
        },
    },
}


@pytest.fixture
def fallback_provider() -> FallbackProvider:
    return FallbackProvider(FallbackDataset(**FALLBACK_DATASET))
