from __future__ import annotations

from typing import Optional


class ConfigError(RuntimeError):
    """Required configuration is missing or invalid."""


class ContractsApiError(Exception):
    """
    Base class for failures talking to the remote contracts API.

    kind:
    - transport           the remote process is not answering
    - http                connection succeeded, status outside 2xx
    - malformed_response  2xx but the body does not have the expected shape
    - not_found           404 on the per-contract analysis endpoint
    """

    kind: str = "api"

    def __init__(self, message: str, *, url: str):
        super().__init__(message)
        self.message = message
        self.url = url

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "url": self.url}


class TransportError(ContractsApiError):
    kind = "transport"

    def __init__(self, *, url: str, base_url: str, reason: str):
        message = (
            f"Cannot connect to the contracts API at {base_url} ({reason}).\n"
            f"- Check that the API server is running and listening on that host/port\n"
            f"- Try the URL manually: {url}\n"
            f"- Check CONTRACTS_API_BASE_URL in your environment or .env file"
        )
        super().__init__(message, url=url)
        self.reason = reason


class HttpStatusError(ContractsApiError):
    kind = "http"

    def __init__(self, *, url: str, status_code: int, reason: str = "", detail: str = ""):
        message = (
            f"Contracts API returned HTTP {status_code} {reason}".rstrip()
            + f" for {url}.\n"
            "The server is running but answered with an error; "
            "check the API server logs for details."
        )
        if detail:
            message += f"\nDetail: {detail[:500]}"
        super().__init__(message, url=url)
        self.status_code = status_code


class MalformedResponseError(ContractsApiError):
    kind = "malformed_response"

    def __init__(self, *, url: str, reasons: Optional[list] = None):
        self.reasons = list(reasons or [])
        message = f"Invalid response from contracts API at {url}"
        if self.reasons:
            message += ": " + "; ".join(self.reasons)
        super().__init__(message, url=url)


class ContractNotFoundError(ContractsApiError):
    kind = "not_found"

    def __init__(self, *, url: str, contract_id: str):
        super().__init__(f'Contract with id "{contract_id}" not found ({url})', url=url)
        self.contract_id = contract_id
