import logging
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from budget_ledger.core.config import settings

logger = logging.getLogger(__name__)

# Methods the ledger routers expose
LEDGER_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def allowed_origins(origins: list[str]) -> list[str]:
    """Normalize configured origins, dropping trailing slashes and duplicates.

    Credentials are always allowed, so a wildcard origin is refused.
    """
    normalized: list[str] = []
    for origin in origins:
        if origin == "*":
            raise ValueError("CORS origin '*' cannot be combined with credentials")
        parsed = urlparse(origin)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid CORS origin: {origin!r}")
        origin = f"{parsed.scheme}://{parsed.netloc}"
        if origin not in normalized:
            normalized.append(origin)
    return normalized


def setup_cors(app: FastAPI) -> None:
    origins = allowed_origins(settings.cors_origins_list)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=LEDGER_METHODS,
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
    logger.info("CORS enabled for %s", ", ".join(origins) or "no origins")
