from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urlencode

from contract_radar.services.contracts.contract_models import FilterSpec


LIMIT_MIN = 1
LIMIT_MAX = 100
NAME_MIN_LENGTH = 3


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def clamp_limit(limit: int) -> int:
    return int(min(max(limit, LIMIT_MIN), LIMIT_MAX))


def build_query_params(
    filters: Optional[FilterSpec] = None,
    limit: Optional[int] = None,
) -> List[Tuple[str, str]]:
    """
    Server-side query parameters for GET /contratos, in canonical order.

    - absent values are omitted
    - limit is clamped to [1, 100]
    - nombre_contrato only when the name has at least 3 characters
    - risk levels are never sent (no server parameter exists)
    - amounts are passed through as given, range checks belong to the caller
    """
    params: List[Tuple[str, str]] = []

    if limit is not None:
        params.append(("limit", str(clamp_limit(limit))))

    if filters is None:
        return params

    if filters.date_from:
        params.append(("fecha_desde", filters.date_from.isoformat()))

    if filters.date_to:
        params.append(("fecha_hasta", filters.date_to.isoformat()))

    if filters.min_amount is not None:
        params.append(("valor_minimo", _format_number(filters.min_amount)))

    if filters.max_amount is not None:
        params.append(("valor_maximo", _format_number(filters.max_amount)))

    if filters.name and len(filters.name) >= NAME_MIN_LENGTH:
        params.append(("nombre_contrato", filters.name))

    if filters.contract_id:
        params.append(("id_contrato", filters.contract_id))

    return params


def build_query_string(
    filters: Optional[FilterSpec] = None,
    limit: Optional[int] = None,
) -> str:
    """Canonical query string (without the leading '?'); '' when nothing applies."""
    return urlencode(build_query_params(filters, limit))
