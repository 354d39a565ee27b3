from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from contract_radar.core.errors import ContractNotFoundError, MalformedResponseError
from contract_radar.repositories.base import BaseApiRepository
from contract_radar.services.contracts.contract_models import (
    ContractsSummary,
    FilterSpec,
    HealthStatus,
)
from contract_radar.services.contracts.contract_validator import check_list_envelope
from contract_radar.services.contracts.query_builder import build_query_string


@dataclass
class ContractListPayload:
    records: List[Any]
    summary: ContractsSummary
    url: str
    query: str = ""
    warnings: List[str] = field(default_factory=list)
    body: Dict[str, Any] = field(default_factory=dict)


def _number(x: Any, default: float = 0) -> float:
    if isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(x):
        return x
    return default


class ContractsApiRepository(BaseApiRepository):
    """
    Remote contracts API

    - GET {base}/contratos?{query}           list + rollups
    - GET {base}/contratos/{id}/analisis     contract + AI analysis
    - GET {base}/contratos (bounded)         availability probe
    """

    def __init__(
        self,
        base_url: str,
        *,
        contracts_endpoint: str = "/contratos",
        analysis_endpoint_template: str = "/contratos/{contract_id}/analisis",
        timeout: float = 30.0,
        health_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log: Optional[logging.Logger] = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport, log=log)
        self.contracts_endpoint = contracts_endpoint
        self.analysis_endpoint_template = analysis_endpoint_template
        self.health_timeout = health_timeout

    def list_url(self, query: str = "") -> str:
        return self._url(self.contracts_endpoint, query)

    def analysis_url(self, contract_id: str) -> str:
        path = self.analysis_endpoint_template.format(contract_id=quote(str(contract_id), safe=""))
        return self._url(path)

    # -------------------------------------------------------
    # LIST
    # -------------------------------------------------------
    async def list_contracts(
        self,
        filters: Optional[FilterSpec] = None,
        limit: Optional[int] = None,
    ) -> ContractListPayload:
        query = build_query_string(filters, limit)
        url = self.list_url(query)
        self.log.info("contracts_request url=%s", url)

        r = await self._get(url)
        body = self._decode_json(r, url)

        check = check_list_envelope(body)
        if not check.ok:
            self.log.error("contracts_response_invalid url=%s reasons=%s", url, check.reasons)
            raise MalformedResponseError(url=url, reasons=check.reasons)

        for w in check.warnings:
            self.log.warning("contracts_response_warning url=%s warning=%s", url, w)

        summary = ContractsSummary(
            total_analyzed=int(_number(body.get("totalContratosAnalizados"))),
            high_risk_count=int(_number(body.get("contratosAltoRiesgo"))),
            total_amount_cop=float(_number(body.get("montoTotalCOP"))),
            metadata=body.get("metadata") if isinstance(body.get("metadata"), dict) else {},
        )

        records = body["contratos"]
        self.log.info(
            "contracts_received url=%s records=%s total_analyzed=%s",
            url, len(records), summary.total_analyzed,
        )
        return ContractListPayload(
            records=records,
            summary=summary,
            url=url,
            query=query,
            warnings=check.warnings,
            body=body,
        )

    # -------------------------------------------------------
    # DETAIL
    # -------------------------------------------------------
    async def fetch_analysis(self, contract_id: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        url = self.analysis_url(contract_id)
        self.log.info("analysis_request contract_id=%s url=%s", contract_id, url)

        r = await self._get(url)
        if r.status_code == 404:
            raise ContractNotFoundError(url=url, contract_id=contract_id)

        body = self._decode_json(r, url)

        reasons: List[str] = []
        if not isinstance(body, dict):
            reasons.append("response body must be a JSON object")
            body = {}
        if not isinstance(body.get("contract"), dict):
            reasons.append("missing contract object")
        if not isinstance(body.get("analysis"), dict):
            reasons.append("missing analysis object")
        if reasons:
            raise MalformedResponseError(url=url, reasons=reasons)

        return body["contract"], body["analysis"]

    # -------------------------------------------------------
    # HEALTH
    # -------------------------------------------------------
    async def check_health(self) -> HealthStatus:
        """Bounded availability probe. Never raises."""
        url = self.list_url()
        start = time.perf_counter()

        def elapsed_ms() -> float:
            return round((time.perf_counter() - start) * 1000.0, 2)

        try:
            async with self._client(timeout=self.health_timeout) as client:
                r = await asyncio.wait_for(client.get(url), timeout=self.health_timeout)
                if not r.is_success:
                    error = f"HTTP {r.status_code}: {r.reason_phrase}"
                    self.log.warning("health_unreachable url=%s error=%s", url, error)
                    return HealthStatus(reachable=False, response_time_ms=elapsed_ms(), error=error)
                r.json()
        except asyncio.TimeoutError:
            error = f"timeout after {self.health_timeout:g}s"
        except httpx.HTTPError as e:
            error = str(e) or e.__class__.__name__
        except ValueError:
            error = "response body is not valid JSON"
        except Exception as e:
            self.log.exception("health_probe_failed url=%s", url)
            error = str(e) or e.__class__.__name__
        else:
            ms = elapsed_ms()
            self.log.info("health_ok url=%s response_time_ms=%s", url, ms)
            return HealthStatus(reachable=True, response_time_ms=ms)

        self.log.warning("health_unreachable url=%s error=%s", url, error)
        return HealthStatus(reachable=False, response_time_ms=elapsed_ms(), error=error)
