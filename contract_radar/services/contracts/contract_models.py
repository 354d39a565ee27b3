from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SortField(str, Enum):
    ID = "id"
    ENTITY = "entity"
    AMOUNT = "amount"
    DATE = "date"
    RISK_LEVEL = "risk_level"
    ANOMALY_PROBABILITY = "anomaly_probability"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ---------- Contract ----------

class Contract(BaseModel):
    """
    Internal contract entity (one row of the dashboard)

    - id comes from Contrato.Codigo, never from a list index
    - amount >= 0 (unparseable source amounts become 0)
    - date is None when the source has no start date
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    entity: str
    amount: float = Field(default=0.0, ge=0)
    date: Optional[dt.date] = None
    risk_level: RiskLevel
    anomaly_probability: float


class ContractsSummary(BaseModel):
    """API-side rollups sent along with the contract list."""
    total_analyzed: int = 0
    high_risk_count: int = 0
    total_amount_cop: float = 0.0
    metadata: Dict[str, Any] = Field(default_factory=dict)


# ---------- Filters ----------

class FilterSpec(BaseModel):
    """
    Caller-owned filter set. Read-only for the pipeline.

    risk_levels has no server parameter: it is applied locally after
    normalization.
    """
    model_config = ConfigDict(frozen=True)

    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    name: Optional[str] = None
    contract_id: Optional[str] = None
    risk_levels: Optional[frozenset[RiskLevel]] = None


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: Optional[SortField] = None
    direction: SortDirection = SortDirection.ASC


# ---------- Pagination ----------

T = TypeVar("T")


class PaginationInfo(BaseModel):
    page: int
    page_size: int
    total_items: int


class PageResult(BaseModel, Generic[T]):
    data: List[T]
    pagination: PaginationInfo
    has_next_page: bool
    has_prev_page: bool
    total_pages: int


# ---------- Analysis ----------

class ShapValue(BaseModel):
    variable: str
    value: float
    description: str = ""
    actual_value: Optional[Any] = None


class ContractAnalysis(BaseModel):
    contract_id: str
    executive_summary: str = ""
    main_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    shap_values: List[ShapValue] = Field(default_factory=list)
    base_probability: float = 0.0
    confidence: float = 0.0
    analyzed_at: Optional[dt.datetime] = None


class ContractAnalysisResult(BaseModel):
    contract: Contract
    analysis: ContractAnalysis
    is_fallback: bool = False
    fallback_reason: Optional[str] = None


# ---------- Pipeline outputs ----------

class RejectedRecord(BaseModel):
    index: int
    code: Optional[str] = None
    defects: List[str]


class ContractListResult(BaseModel):
    contracts: List[Contract]
    summary: ContractsSummary
    rejected: List[RejectedRecord] = Field(default_factory=list)
    query: str = ""
    raw_body: Dict[str, Any] = Field(default_factory=dict, exclude=True)


class DashboardStats(BaseModel):
    # computed from the working set
    total: int
    high_risk: int
    medium_risk: int
    low_risk: int
    total_amount: float
    avg_anomaly: int
    total_amount_label: str

    # reported by the API
    total_analyzed: int
    api_high_risk_count: int
    total_amount_cop: float
    high_risk_percentage: float


class DashboardSnapshot(BaseModel):
    """
    Caller-held state of one pipeline run.

    working_set is filtered but unsorted; page changes re-sort and slice it
    without calling the API again.
    """
    model_config = ConfigDict(frozen=True)

    filters: FilterSpec
    sort: SortSpec
    working_set: List[Contract]
    summary: ContractsSummary
    stats: DashboardStats
    page: PageResult
    rejected_count: int = 0
    query: str = ""


class HealthStatus(BaseModel):
    reachable: bool
    response_time_ms: Optional[float] = None
    error: Optional[str] = None
