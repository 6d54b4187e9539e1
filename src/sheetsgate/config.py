"""Configuration management for SheetsGate."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# Drive rejects pageSize values above this.
DRIVE_MAX_PAGE_SIZE = 1000


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # Service account key: a file path, or the key JSON itself (takes precedence)
    google_application_credentials: Path = Path(
        os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "service-account.json")
    )
    google_credentials_json: Optional[str] = os.getenv("GOOGLE_CREDENTIALS_JSON")

    # Restricts list-spreadsheets to files this account can write, when set
    service_account_email: str = os.getenv("SERVICE_ACCOUNT_EMAIL", "")

    # Server settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Drive listing page sizes
    list_page_size: int = int(os.getenv("LIST_PAGE_SIZE", "100"))
    probe_page_size: int = int(os.getenv("PROBE_PAGE_SIZE", "1000"))

    @staticmethod
    def capped_page_size(size: int) -> int:
        """Clamp a page size into the range Drive accepts."""
        return max(1, min(size, DRIVE_MAX_PAGE_SIZE))


settings = Settings()
