"""Bearer-token lookup: token file first, OS keyring otherwise."""

from __future__ import annotations

import logging
from pathlib import Path

import keyring

from epic_status_report.core.errors import CredentialReadError
from epic_status_report.services.config_manager import ConfigManager

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "epic-status-report"
KEYRING_USER = "api_token"


class AuthManager:
    """Supply the Jira bearer token.

    ``api_key_path`` in the config points at a file holding the token. When
    it is empty the token is read from the OS keyring instead.
    """

    def __init__(self, config: ConfigManager) -> None:
        self._config = config

    @property
    def api_key_path(self) -> str:
        """Return the configured token file path (may be empty)."""
        return str(self._config.get("api_key_path", "") or "")

    def get_api_token(self) -> str:
        """Return the trimmed token.

        Raises:
            CredentialReadError: If no usable token can be found.
        """
        if self.api_key_path:
            return self._read_token_file(Path(self.api_key_path))

        token = keyring.get_password(KEYRING_SERVICE, KEYRING_USER)
        if not token or not token.strip():
            raise CredentialReadError(
                "No api_key_path configured and no token stored in the keyring "
                "(use --store-token)"
            )
        logger.debug("Using API token from keyring")
        return token.strip()

    def store_api_token(self, token: str) -> None:
        """Save *token* to the OS keyring."""
        token = token.strip()
        if not token:
            raise CredentialReadError("Refusing to store an empty token")
        keyring.set_password(KEYRING_SERVICE, KEYRING_USER, token)
        logger.info("API token stored in keyring (service=%s)", KEYRING_SERVICE)

    @staticmethod
    def _read_token_file(path: Path) -> str:
        try:
            token = path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise CredentialReadError(f"Cannot read API key file {path}: {exc}") from exc
        if not token:
            raise CredentialReadError(f"API key file {path} is empty")
        logger.debug("Using API token from %s", path)
        return token
