"""
Persistent Notebook Settings
============================
Stores the Apps Script endpoint and the optional AI key in a small JSON
file under the teacher's home directory.

An empty endpoint is not an error: it simply means the notebook still needs
to be configured.
"""

import os
import json
import logging
import tempfile

from backend.config import (
    SETTINGS_FILE, ENDPOINT_URL_KEY, AI_CREDENTIAL_KEY,
    DEFAULT_ENDPOINT_URL, GEMINI_API_KEY,
    ENDPOINT_DOMAIN_MARKER, MIN_CREDENTIAL_LENGTH,
)
from backend.errors import InvalidEndpoint, InvalidCredential

logger = logging.getLogger(__name__)


class Configuration:
    """Endpoint URL plus optional AI credential."""

    __slots__ = ("endpoint_url", "ai_credential")

    def __init__(self, endpoint_url: str = "", ai_credential: str = ""):
        self.endpoint_url = endpoint_url or ""
        self.ai_credential = ai_credential or ""

    def __eq__(self, other):
        if not isinstance(other, Configuration):
            return NotImplemented
        return (self.endpoint_url, self.ai_credential) == (other.endpoint_url, other.ai_credential)

    def __repr__(self):
        masked = "***" if self.ai_credential else ""
        return f"Configuration(endpoint_url={self.endpoint_url!r}, ai_credential={masked!r})"

    @property
    def has_endpoint(self) -> bool:
        return bool(self.endpoint_url)

    @property
    def has_credential(self) -> bool:
        return bool(self.ai_credential)

    def to_dict(self, include_secret: bool = False):
        data = {
            "endpoint_url": self.endpoint_url,
            "has_ai_credential": self.has_credential,
        }
        if include_secret:
            data["ai_credential"] = self.ai_credential
        return data


def validate(candidate: Configuration) -> Configuration:
    """
    Check a candidate configuration and return a cleaned copy.

    Raises InvalidEndpoint when a non-empty endpoint does not point at the
    Apps Script domain, and InvalidCredential when a credential is given
    but shorter than MIN_CREDENTIAL_LENGTH.
    """
    endpoint = (candidate.endpoint_url or "").strip()
    credential = (candidate.ai_credential or "").strip()

    if endpoint and ENDPOINT_DOMAIN_MARKER not in endpoint:
        raise InvalidEndpoint()
    if credential and len(credential) < MIN_CREDENTIAL_LENGTH:
        raise InvalidCredential()

    return Configuration(endpoint, credential)


class ConfigStore:
    """Reads and writes the notebook configuration."""

    def __init__(self, settings_file: str = None,
                 default_endpoint_url: str = None, default_ai_credential: str = None):
        self.settings_file = settings_file or SETTINGS_FILE
        self.default_endpoint_url = DEFAULT_ENDPOINT_URL if default_endpoint_url is None else default_endpoint_url
        self.default_ai_credential = GEMINI_API_KEY if default_ai_credential is None else default_ai_credential
        self._current = self.load()

    @property
    def current(self) -> Configuration:
        return self._current

    def needs_configuration(self) -> bool:
        return not self._current.has_endpoint

    def _read_settings(self) -> dict:
        if not os.path.exists(self.settings_file):
            return {}
        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read settings file %s: %s", self.settings_file, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self.settings_file)
            return {}
        return data

    def load(self) -> Configuration:
        """
        Load the persisted configuration.

        Environment defaults fill only keys that were never saved; a value
        saved as empty stays empty.
        """
        data = self._read_settings()
        endpoint = data[ENDPOINT_URL_KEY] if ENDPOINT_URL_KEY in data else self.default_endpoint_url
        credential = data[AI_CREDENTIAL_KEY] if AI_CREDENTIAL_KEY in data else self.default_ai_credential
        endpoint = "" if endpoint is None else endpoint
        credential = "" if credential is None else credential
        return Configuration(str(endpoint).strip(), str(credential).strip())

    def validate(self, candidate: Configuration) -> Configuration:
        return validate(candidate)

    def save(self, candidate: Configuration) -> Configuration:
        """Validate and persist both keys in one atomic file replace."""
        cleaned = validate(candidate)

        data = self._read_settings()
        data[ENDPOINT_URL_KEY] = cleaned.endpoint_url
        data[AI_CREDENTIAL_KEY] = cleaned.ai_credential

        directory = os.path.dirname(os.path.abspath(self.settings_file))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".notebook_settings_", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.settings_file)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        self._current = cleaned
        logger.info("Configuration saved (endpoint set: %s, AI key set: %s)",
                    cleaned.has_endpoint, cleaned.has_credential)
        return cleaned
