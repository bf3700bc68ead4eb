import base64
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urlsplit

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class FreshdeskConfiguration:
    """Connection settings for one Freshdesk account.

    ``freshdesk_domain`` may be given as ``yourcompany.freshdesk.com`` or as a
    full ``https://yourcompany.freshdesk.com`` URL; it is normalised to the
    latter.
    """

    freshdesk_domain: str
    api_key: str
    timeout: float = 20.0
    connect_timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.freshdesk_domain or not self.freshdesk_domain.strip():
            raise ConfigurationError("freshdesk_domain must not be blank")
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError("api_key must not be blank")
        object.__setattr__(self, "freshdesk_domain", _normalise_domain(self.freshdesk_domain))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FreshdeskConfiguration":
        """Build a configuration from FRESHDESK_DOMAIN and FRESHDESK_API_KEY."""
        env = os.environ if environ is None else environ
        domain = env.get("FRESHDESK_DOMAIN")
        api_key = env.get("FRESHDESK_API_KEY")
        missing = []
        if not api_key:
            missing.append("FRESHDESK_API_KEY")
        if not domain:
            missing.append("FRESHDESK_DOMAIN")
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")
        return cls(freshdesk_domain=domain, api_key=api_key)

    @property
    def auth_header(self) -> str:
        # Freshdesk basic auth uses api_key:X
        token = base64.b64encode(f"{self.api_key}:X".encode()).decode()
        return f"Basic {token}"


def _normalise_domain(domain: str) -> str:
    value = domain.strip().rstrip("/")
    if "://" not in value:
        value = f"https://{value}"
    host = urlsplit(value).hostname or ""
    if "." not in host:
        raise ConfigurationError(f"freshdesk_domain looks invalid (no dot present): {domain!r}")
    return value
