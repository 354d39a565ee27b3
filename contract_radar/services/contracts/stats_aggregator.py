from __future__ import annotations

import math
from typing import List

from contract_radar.services.contracts.contract_models import (
    Contract,
    ContractsSummary,
    DashboardStats,
    RiskLevel,
)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def format_large_amount(amount: float) -> str:
    """Compact currency label: $1.2T, $3.4B, otherwise whole millions ($12M)."""
    if amount >= 1e12:
        return f"${amount / 1e12:.1f}T"
    if amount >= 1e9:
        return f"${amount / 1e9:.1f}B"
    return f"${_round_half_up(amount / 1e6)}M"


def high_risk_percentage(summary: ContractsSummary) -> float:
    if summary.total_analyzed <= 0:
        return 0.0
    return summary.high_risk_count / summary.total_analyzed * 100


def compute_dashboard_stats(contracts: List[Contract], summary: ContractsSummary) -> DashboardStats:
    """
    Dashboard figures for the full (unpaginated, post-filter) working set,
    next to the rollups the API reported for the whole query.
    """
    counts = {level: 0 for level in RiskLevel}
    total_amount = 0.0
    anomaly_sum = 0.0
    for c in contracts:
        counts[c.risk_level] += 1
        total_amount += c.amount
        anomaly_sum += c.anomaly_probability

    avg_anomaly = _round_half_up(anomaly_sum / len(contracts)) if contracts else 0

    return DashboardStats(
        total=len(contracts),
        high_risk=counts[RiskLevel.HIGH],
        medium_risk=counts[RiskLevel.MEDIUM],
        low_risk=counts[RiskLevel.LOW],
        total_amount=total_amount,
        avg_anomaly=avg_anomaly,
        total_amount_label=format_large_amount(total_amount),
        total_analyzed=summary.total_analyzed,
        api_high_risk_count=summary.high_risk_count,
        total_amount_cop=summary.total_amount_cop,
        high_risk_percentage=high_risk_percentage(summary),
    )
