"""Transport security options for connecting to Feast serving."""

from dataclasses import dataclass
from typing import Optional

from feast_serving.client.credentials import CallCredentials


@dataclass
class SecurityConfig:
    """
    Security options for ``FeastClient.create_secure``.

    Attributes:
        tls_enabled: connect over TLS instead of plaintext
        certificate_path: PEM root certificate; system roots when unset
        credentials: credential attached to every call
    """
    tls_enabled: bool = False
    certificate_path: Optional[str] = None
    credentials: Optional[CallCredentials] = None
