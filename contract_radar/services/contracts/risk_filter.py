from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from contract_radar.services.contracts.contract_models import Contract, RiskLevel

logger = logging.getLogger("contract_radar.filter")


def filter_by_risk_levels(
    contracts: List[Contract],
    risk_levels: Optional[Iterable[RiskLevel]] = None,
    *,
    log: Optional[logging.Logger] = None,
) -> List[Contract]:
    """
    Keep contracts whose risk level is in `risk_levels`.

    Runs locally (the API has no risk-level parameter), after normalization
    and before sorting. Order-preserving and idempotent; an absent or empty
    set keeps every contract. Always returns a new list.
    """
    wanted = {RiskLevel(r) for r in risk_levels} if risk_levels else set()
    if not wanted:
        return list(contracts)

    kept = [c for c in contracts if c.risk_level in wanted]
    (log or logger).info(
        "risk_filter_applied levels=%s before=%s after=%s",
        ",".join(sorted(r.value for r in wanted)), len(contracts), len(kept),
    )
    return kept
