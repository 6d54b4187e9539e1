"""Service account credential loading and API handle construction."""

import json
import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Optional

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/drive.readonly",
    "https://www.googleapis.com/auth/spreadsheets",
]


class Capability(str, Enum):
    """Upstream API a handle is built for."""

    FILE_LISTING = "fileListing"
    SPREADSHEET_VALUES = "spreadsheetValues"


_SERVICES = {
    Capability.FILE_LISTING: ("drive", "v3"),
    Capability.SPREADSHEET_VALUES: ("sheets", "v4"),
}


class CredentialProvider:
    """Loads the service account key once and hands out API handles.

    The key is read on first use, not at construction, so the server can
    start (and answer liveness probes) before credentials are in place.
    Every call after a failed load fails again with ConfigurationError.

    Handles are built per call; the underlying httplib2 transport is not
    safe to share between worker threads.
    """

    def __init__(
        self,
        key_path: Optional[Path] = None,
        key_json: Optional[str] = None,
        scopes: Optional[list[str]] = None,
    ):
        self._key_path = key_path
        self._key_json = key_json
        self._scopes = scopes or SCOPES
        self._credentials = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "CredentialProvider":
        return cls(
            key_path=settings.google_application_credentials,
            key_json=settings.google_credentials_json,
        )

    def is_configured(self) -> bool:
        """Whether a key reference is present. Does not load the key."""
        if self._key_json:
            return True
        return self._key_path is not None and Path(self._key_path).exists()

    @property
    def credentials(self) -> service_account.Credentials:
        """Get the service account credential, loading it on first access."""
        if self._credentials is None:
            with self._lock:
                if self._credentials is None:
                    self._credentials = self._load()
        return self._credentials

    @property
    def service_account_email(self) -> str:
        return self.credentials.service_account_email

    def _load(self) -> service_account.Credentials:
        if self._key_json:
            try:
                info = json.loads(self._key_json)
                creds = service_account.Credentials.from_service_account_info(
                    info, scopes=self._scopes
                )
            except (json.JSONDecodeError, ValueError, KeyError) as e:
                raise ConfigurationError(f"Invalid inline service account key: {e}")
            logger.info("Loaded service account credentials from inline JSON")
            return creds

        if self._key_path is None:
            raise ConfigurationError(
                "No service account key configured. Set GOOGLE_APPLICATION_CREDENTIALS "
                "or GOOGLE_CREDENTIALS_JSON."
            )

        key_path = Path(self._key_path)
        if not key_path.exists():
            raise ConfigurationError(f"Service account key file not found at {key_path}")

        try:
            creds = service_account.Credentials.from_service_account_file(
                str(key_path), scopes=self._scopes
            )
        except (OSError, ValueError, KeyError) as e:
            raise ConfigurationError(f"Unable to read service account key {key_path}: {e}")

        logger.info(f"Loaded service account credentials from {key_path}")
        return creds

    def acquire_handle(self, capability: Capability):
        """Build an authenticated API resource for the given capability."""
        name, version = _SERVICES[Capability(capability)]
        try:
            return build(name, version, credentials=self.credentials, cache_discovery=False)
        except GoogleAuthError as e:
            raise ConfigurationError(f"Failed to build {name} {version} client: {e}")
