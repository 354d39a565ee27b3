from contract_radar.core.config import settings
from contract_radar.core.errors import ConfigError
from contract_radar.repositories.contracts_api_repo import ContractsApiRepository

_client: ContractsApiRepository | None = None


def get_contracts_api() -> ContractsApiRepository:
    global _client
    if _client is not None:
        return _client
    if not settings.CONTRACTS_API_BASE_URL:
        raise ConfigError("Missing CONTRACTS_API_BASE_URL")
    _client = ContractsApiRepository(
        settings.CONTRACTS_API_BASE_URL,
        contracts_endpoint=settings.CONTRACTS_ENDPOINT,
        analysis_endpoint_template=settings.ANALYSIS_ENDPOINT_TEMPLATE,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        health_timeout=settings.HEALTH_TIMEOUT_SECONDS,
    )
    return _client
