import datetime
import logging
import threading
from functools import lru_cache
from pathlib import Path

import requests
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from sheets_mcp.config import get_settings
from sheets_mcp.exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

READ_WRITE_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
READ_ONLY_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"


def _utcnow() -> datetime.datetime:
    # google-auth reports expiry as a naive UTC datetime
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class CredentialManager:
    """Owns the service-account credential and its cached bearer token.

    States: ``unset`` before the first exchange, ``valid`` while the token has
    more than ``refresh_margin`` left, ``expired`` once inside the margin, and
    ``refreshing`` while an exchange is in flight. Refreshes are single-flight:
    concurrent callers wait on the lock and reuse the token the first caller
    obtained.
    """

    def __init__(self, key_file: Path, scopes: list[str], refresh_margin: int = 300):
        self.key_file = key_file
        self.scopes = scopes
        self.refresh_margin = datetime.timedelta(seconds=refresh_margin)
        self._credentials = self._load()
        self._session = requests.Session()
        self._lock = threading.Lock()
        self._refreshing = False

    def _load(self) -> service_account.Credentials:
        if not self.key_file.exists():
            raise ConfigurationError(f"Service account key file not found at {self.key_file}")
        try:
            return service_account.Credentials.from_service_account_file(str(self.key_file), scopes=self.scopes)
        except OSError as e:
            raise ConfigurationError(f"Cannot read service account key file {self.key_file}: {e}") from e
        except (ValueError, KeyError) as e:
            raise ConfigurationError(f"Malformed service account key file {self.key_file}: {e}") from e

    @property
    def service_account_email(self) -> str:
        return self._credentials.service_account_email

    @property
    def state(self) -> str:
        if self._refreshing:
            return "refreshing"
        if not self._credentials.token:
            return "unset"
        return "valid" if self._is_current() else "expired"

    def _is_current(self) -> bool:
        creds = self._credentials
        if not creds.token or creds.expiry is None:
            return False
        return _utcnow() < creds.expiry - self.refresh_margin

    def acquire(self) -> service_account.Credentials:
        """Return credentials holding a token that is good for at least the refresh margin."""
        if self._is_current():
            return self._credentials
        with self._lock:
            if self._is_current():
                return self._credentials
            self._refreshing = True
            try:
                logger.info("Exchanging service account assertion for %s", self.service_account_email)
                self._credentials.refresh(Request(session=self._session))
            except (RefreshError, TransportError) as e:
                raise AuthenticationError(f"Token exchange failed for {self.service_account_email}: {e}") from e
            finally:
                self._refreshing = False
            logger.debug("Token valid until %s", self._credentials.expiry)
        return self._credentials

    def get_access_token(self) -> str:
        return self.acquire().token


def _scopes(read_only: bool) -> list[str]:
    return [READ_ONLY_SCOPE if read_only else READ_WRITE_SCOPE]


@lru_cache
def get_credential_manager() -> CredentialManager:
    """Build the process-wide credential manager from settings. Raises ConfigurationError."""
    settings = get_settings()
    if settings.google_application_credentials is None:
        raise ConfigurationError(
            "GOOGLE_APPLICATION_CREDENTIALS is not set. "
            "Point it at a service account JSON key downloaded from Google Cloud Console."
        )
    return CredentialManager(
        settings.google_application_credentials,
        _scopes(settings.read_only),
        refresh_margin=settings.token_refresh_margin,
    )
