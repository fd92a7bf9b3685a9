"""OAuth2 client-credentials token acquisition."""

from __future__ import annotations

import logging
from typing import Protocol

from oauthlib.oauth2 import BackendApplicationClient
from requests_oauthlib import OAuth2Session

from .types import AuthenticationError, Credentials

logger = logging.getLogger(__name__)

DEFAULT_AUTHORITY = "https://login.microsoftonline.com"


class TokenProvider(Protocol):
    def get_token(self, credentials: Credentials, resource: str) -> str:
        ...


class AzureADTokenProvider:
    """Requests a bearer token scoped to ``resource`` from ``{authority}/{tenant}/oauth2/token``."""

    def __init__(self, authority: str = DEFAULT_AUTHORITY, timeout_seconds: float = 20) -> None:
        self.authority = authority.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def token_url(self, tenant_id: str) -> str:
        return f"{self.authority}/{tenant_id}/oauth2/token"

    def get_token(self, credentials: Credentials, resource: str) -> str:
        missing = credentials.missing_fields()
        if not (resource or "").strip():
            missing.append("resource")
        if missing:
            raise AuthenticationError("Missing authentication inputs: " + ", ".join(missing))

        token_url = self.token_url(credentials.tenant_id)
        logger.debug("Requesting client-credentials token from %s for %s", token_url, resource)

        session = OAuth2Session(client=BackendApplicationClient(client_id=credentials.client_id))
        try:
            token = session.fetch_token(
                token_url=token_url,
                client_secret=credentials.client_secret,
                include_client_id=True,
                resource=resource,
                timeout=self.timeout_seconds,
            )
        except Exception as exc:
            raise AuthenticationError(f"Token request to {token_url} failed: {exc}") from exc
        finally:
            session.close()

        access_token = str((token or {}).get("access_token") or "").strip()
        if not access_token:
            raise AuthenticationError("Token response did not contain an access_token")
        return access_token
