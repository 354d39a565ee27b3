from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field

from contract_radar.core.config import settings
from contract_radar.core.errors import ConfigError
from contract_radar.services.contracts.contract_models import Contract, ContractAnalysis
from contract_radar.services.contracts.contract_normalizer import (
    normalize_analysis,
    normalize_contract,
)

logger = logging.getLogger("contract_radar.fallback")


class FallbackDataset(BaseModel):
    meta: Dict[str, Any] = Field(default_factory=dict)
    # list wire shape (same as GET /contratos records)
    contracts: List[Dict[str, Any]] = Field(min_length=1)
    # analysis wire shape keyed by contract code
    analyses: Dict[str, Dict[str, Any]] = Field(min_length=1)


def load_fallback_dataset(path: str) -> FallbackDataset:
    p = Path(path)

    if not p.exists():
        raise ConfigError(f"Fallback dataset not found: {path}")

    with open(p, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    return FallbackDataset(**(raw or {}))


class FallbackProvider:
    """
    Deterministic local contract+analysis pairs for the detail view.

    - known id   -> its contract, its analysis (or the first one)
    - unknown id -> first contract, first analysis
    The returned pair always carries the requested id.
    """

    def __init__(self, dataset: FallbackDataset, *, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self.contracts: List[Contract] = [normalize_contract(r, log=self.log) for r in dataset.contracts]
        self.analyses: Dict[str, ContractAnalysis] = {
            key: normalize_analysis({"contractId": key, **record})
            for key, record in dataset.analyses.items()
        }
        self._first_analysis = next(iter(self.analyses.values()))

    def get_pair(self, contract_id: str) -> Tuple[Contract, ContractAnalysis]:
        contract = next((c for c in self.contracts if c.id == contract_id), None)

        if contract is None:
            self.log.info("fallback_pair contract_id=%s source=first_example", contract_id)
            contract = self.contracts[0].model_copy(update={"id": contract_id})
            analysis = self._first_analysis
        else:
            self.log.info("fallback_pair contract_id=%s source=matching_example", contract_id)
            analysis = self.analyses.get(contract_id, self._first_analysis)

        return contract, analysis.model_copy(update={"contract_id": contract_id})


@lru_cache()
def get_fallback_provider() -> FallbackProvider:
    return FallbackProvider(load_fallback_dataset(settings.FALLBACK_DATASET_PATH))
