"""
OneDriveClient - OAuth and folder listing against Microsoft identity and Graph.

Uses httpx for HTTP calls. Every non-2xx response raises OneDriveError with
the upstream body in the message.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from urllib.parse import quote, urlencode

import httpx

import config
from db import utcnow

logger = logging.getLogger(__name__)

LOGIN_BASE = "https://login.microsoftonline.com"
GRAPH_BASE = "https://graph.microsoft.com/v1.0"
SCOPES = "Files.Read Files.Read.All Sites.Read.All offline_access"


class OneDriveError(Exception):
    """Upstream OAuth or Graph failure."""


@dataclass
class TokenGrant:
    """Tokens returned by the authorization-code exchange."""

    access_token: str
    refresh_token: str | None
    expires_at: datetime


@dataclass
class RemoteFile:
    """One item of a OneDrive folder listing."""

    id: str
    name: str
    web_url: str | None = None
    download_url: str | None = None
    size: int | None = None
    modified_at: datetime | None = None

    @classmethod
    def from_graph(cls, item: dict) -> "RemoteFile":
        modified = item.get("lastModifiedDateTime")
        return cls(
            id=item["id"],
            name=item["name"],
            web_url=item.get("webUrl"),
            download_url=item.get("@microsoft.graph.downloadUrl"),
            size=item.get("size"),
            modified_at=datetime.fromisoformat(modified) if modified else None,
        )


class OneDriveClient:
    """Thin async client for the three upstream calls the sync needs."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        tenant_id: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize OneDriveClient.

        Args:
            client_id: Azure app client ID. Defaults to MICROSOFT_CLIENT_ID.
            client_secret: Azure app secret. Defaults to MICROSOFT_CLIENT_SECRET.
            tenant_id: Azure tenant. Defaults to MICROSOFT_TENANT_ID.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        settings = config.settings
        self.client_id = client_id or settings.MICROSOFT_CLIENT_ID
        self.client_secret = client_secret or settings.MICROSOFT_CLIENT_SECRET
        self.tenant_id = tenant_id or settings.MICROSOFT_TENANT_ID
        self.timeout = timeout or settings.ONEDRIVE_TIMEOUT_SECONDS
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, timeout=self.timeout)

    def build_authorize_url(self, redirect_uri: str, state: str) -> str:
        """URL the user visits to grant access; `state` round-trips the organization id."""
        if not self.client_id:
            raise OneDriveError("MICROSOFT_CLIENT_ID is not configured")
        query = urlencode(
            {
                "client_id": self.client_id,
                "response_type": "code",
                "redirect_uri": redirect_uri,
                "scope": SCOPES,
                "state": state,
            },
            quote_via=quote,
        )
        return f"{LOGIN_BASE}/{self.tenant_id}/oauth2/v2.0/authorize?{query}"

    async def exchange_code(self, code: str, redirect_uri: str) -> TokenGrant:
        """
        Exchange an authorization code for tokens.

        Raises:
            OneDriveError: If the token endpoint rejects the exchange
        """
        async with self._client() as client:
            response = await client.post(
                f"{LOGIN_BASE}/{self.tenant_id}/oauth2/v2.0/token",
                data={
                    "client_id": self.client_id or "",
                    "client_secret": self.client_secret or "",
                    "code": code,
                    "redirect_uri": redirect_uri,
                    "grant_type": "authorization_code",
                },
            )

        if not response.is_success:
            raise OneDriveError(f"Token exchange failed: {response.text}")

        tokens = response.json()
        return TokenGrant(
            access_token=tokens["access_token"],
            refresh_token=tokens.get("refresh_token"),
            expires_at=utcnow() + timedelta(seconds=int(tokens.get("expires_in", 3600))),
        )

    async def list_folder(self, access_token: str, folder_path: str) -> list[RemoteFile]:
        """
        List the files directly inside a folder. Sub-folders are skipped.

        Raises:
            OneDriveError: If Graph rejects the request
        """
        url = f"{GRAPH_BASE}/me/drive/root:{quote(folder_path)}:/children"
        async with self._client() as client:
            response = await client.get(
                url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )

        if not response.is_success:
            raise OneDriveError(f"Failed to fetch files: {response.text}")

        items = response.json().get("value", [])
        files = [RemoteFile.from_graph(item) for item in items if "folder" not in item]
        logger.info("Listed %d files in OneDrive folder %s", len(files), folder_path)
        return files
