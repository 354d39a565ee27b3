from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable, Dict, List, Optional

from contract_radar.services.contracts.collation import spanish_sort_key
from contract_radar.services.contracts.contract_models import (
    Contract,
    RiskLevel,
    SortDirection,
    SortField,
)

logger = logging.getLogger("contract_radar.sorter")


RISK_ORDER = {RiskLevel.HIGH: 3, RiskLevel.MEDIUM: 2, RiskLevel.LOW: 1}


def _date_key(c: Contract) -> tuple:
    # missing dates compare greater than any date
    if c.date is None:
        return (1, dt.date.min)
    return (0, c.date)


SORT_KEYS: Dict[SortField, Callable[[Contract], Any]] = {
    SortField.ID: lambda c: spanish_sort_key(c.id),
    SortField.ENTITY: lambda c: spanish_sort_key(c.entity),
    SortField.AMOUNT: lambda c: c.amount,
    SortField.DATE: _date_key,
    SortField.RISK_LEVEL: lambda c: RISK_ORDER[c.risk_level],
    SortField.ANOMALY_PROBABILITY: lambda c: c.anomaly_probability,
}


def sort_contracts(
    contracts: List[Contract],
    field: Optional[SortField] = None,
    direction: SortDirection = SortDirection.ASC,
    *,
    log: Optional[logging.Logger] = None,
) -> List[Contract]:
    """
    Stable sort of the working set by one field.

    No field -> same order (new list). Descending uses reverse=True, which
    keeps equal keys in input order.
    """
    if field is None:
        return list(contracts)

    field = SortField(field)
    direction = SortDirection(direction)

    out = sorted(
        contracts,
        key=SORT_KEYS[field],
        reverse=direction == SortDirection.DESC,
    )
    (log or logger).debug(
        "contracts_sorted field=%s direction=%s count=%s",
        field.value, direction.value, len(out),
    )
    return out
