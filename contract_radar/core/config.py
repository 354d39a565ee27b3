from pathlib import Path
from typing import List

from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()

_DEFAULT_FALLBACK_DATASET = str(
    Path(__file__).resolve().parent.parent / "data" / "fallback_contracts.yaml"
)


class Settings(BaseModel):
    # Remote contracts API
    CONTRACTS_API_BASE_URL: str = os.getenv("CONTRACTS_API_BASE_URL", "http://localhost:8000")
    CONTRACTS_ENDPOINT: str = os.getenv("CONTRACTS_ENDPOINT", "/contratos")
    ANALYSIS_ENDPOINT_TEMPLATE: str = os.getenv(
        "ANALYSIS_ENDPOINT_TEMPLATE", "/contratos/{contract_id}/analisis"
    )

    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
    HEALTH_TIMEOUT_SECONDS: float = float(os.getenv("HEALTH_TIMEOUT_SECONDS", "10"))

    # Dashboard
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

    # Local example data used when the analysis endpoint is unavailable
    FALLBACK_DATASET_PATH: str = os.getenv("FALLBACK_DATASET_PATH", _DEFAULT_FALLBACK_DATASET)

    APP_ENV: str = os.getenv("APP_ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
    )

    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
