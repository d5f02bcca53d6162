"""
Credential Loading

Turns locally stored Google credentials into the opaque handle used by
DriveClient. Interactive OAuth consent and token generation are handled by
external tooling; this module only reads what is already on disk.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account

from .config import GoogleConfig

logger = logging.getLogger("drivesearch.common.credentials")

SCOPES = [
    "https://www.googleapis.com/auth/drive.readonly",
    "https://www.googleapis.com/auth/documents.readonly",
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/presentations.readonly",
]

DEFAULT_CREDS_PATH = Path.home() / ".config" / "gcloud" / "credentials.json"
DEFAULT_TOKEN_PATH = Path.home() / ".drivesearch" / "token.json"

CredentialProvider = Callable[[], Optional[Any]]


@dataclass
class CredentialStatus:
    """Where the active credentials came from"""
    loaded: bool
    method: str = "none"  # "service_account", "authorized_user", "none"
    source: str = ""


class FileCredentialProvider:
    """
    Loads credentials from a service account key or an authorized-user token.

    Search order:
    1. Service account key (config, GOOGLE_APPLICATION_CREDENTIALS, gcloud default)
    2. Authorized-user token file (refreshed when expired)

    Calling the provider returns None when nothing usable is found, so callers
    can short-circuit with an authentication failure.
    """

    def __init__(self, config: GoogleConfig):
        self._config = config
        self._credentials = None
        self.status = CredentialStatus(loaded=False)

    def __call__(self) -> Optional[Any]:
        # AuthorizedHttp refreshes loaded credentials on its own
        if self._credentials is not None:
            return self._credentials

        try:
            self._credentials = self._load()
        except (GoogleAuthError, ValueError, OSError) as e:
            logger.error("Failed to load Google credentials: %s", e)
            self._credentials = None
            self.status = CredentialStatus(loaded=False)
        return self._credentials

    def _load(self) -> Optional[Any]:
        for path in (self._config.credentials_file, os.environ.get("GOOGLE_APPLICATION_CREDENTIALS"), DEFAULT_CREDS_PATH):
            if path and Path(path).expanduser().exists():
                creds = service_account.Credentials.from_service_account_file(
                    str(Path(path).expanduser()), scopes=SCOPES
                )
                if self._config.delegated_user:
                    creds = creds.with_subject(self._config.delegated_user)
                self.status = CredentialStatus(loaded=True, method="service_account", source=str(path))
                return creds

        token_path = Path(self._config.token_file or DEFAULT_TOKEN_PATH).expanduser()
        if token_path.exists():
            creds = user_credentials.Credentials.from_authorized_user_file(str(token_path), SCOPES)
            if creds.expired and creds.refresh_token:
                try:
                    creds.refresh(Request())
                except RefreshError as e:
                    logger.warning("Token refresh failed for %s: %s", token_path, e)
                    return None
            if creds.valid:
                self.status = CredentialStatus(loaded=True, method="authorized_user", source=str(token_path))
                return creds

        logger.info("No Google credentials found")
        self.status = CredentialStatus(loaded=False)
        return None
