import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import quote

from yarl import URL

from frostbow.catalogs.base import CatalogList
from frostbow.contracts.aws import SigningKey
from frostbow.contracts.catalogs import CatalogClientConfig
from frostbow.exceptions.exceptions import (
    CatalogClientError,
    CredentialFailureError,
    ProviderError,
    ProviderUnavailableError,
)


if TYPE_CHECKING:
    from aiohttp import ClientSession


logger = logging.getLogger(__name__)

DEFAULT_CATALOG_NAME = "default"


def sign_request(
    key: SigningKey, method: str, url: str, headers: Dict[str, str]
) -> Dict[str, str]:
    """Returns ``headers`` extended with an AWS SigV4 signature."""
    from botocore.auth import SigV4Auth
    from botocore.awsrequest import AWSRequest
    from botocore.credentials import Credentials

    request = AWSRequest(method=method, url=url, headers=dict(headers))
    SigV4Auth(
        Credentials(key.access_key, key.secret_key, key.session_token),
        key.service,
        key.region,
    ).add_auth(request)
    return dict(request.headers.items())


class RestCatalogClient:
    """Minimal Iceberg REST catalog client."""

    def __init__(self, *, config: CatalogClientConfig, client: "ClientSession") -> None:
        self._config = config
        self._client = client
        self._base_path = config.base_path.rstrip("/")

    async def get_config(self) -> Dict[str, Any]:
        return await self._get("v1/config")

    async def list_namespaces(self, prefix: Optional[str] = None) -> List[str]:
        path = "v1/namespaces"
        if prefix:
            path = f"v1/{quote(prefix, safe='')}/namespaces"
        namespaces: List[str] = []
        page_token: Optional[str] = None
        while True:
            query = f"?pageToken={quote(page_token, safe='')}" if page_token else ""
            payload = await self._get(path + query)
            namespaces.extend(".".join(ns) for ns in payload.get("namespaces", []))
            page_token = payload.get("next-page-token")
            if not page_token:
                return namespaces

    async def _get(self, path: str) -> Dict[str, Any]:
        from aiohttp import BasicAuth, ClientError, ClientResponseError

        url = f"{self._base_path}/{path}"
        headers = await self._headers("GET", url)
        auth = None
        if self._config.basic_auth and self._config.signing_key is None:
            auth = BasicAuth(
                self._config.basic_auth.username, self._config.basic_auth.password
            )
        logger.debug(f"GET {url}")
        try:
            async with self._client.get(
                URL(url, encoded=True), headers=headers, auth=auth
            ) as resp:
                try:
                    resp.raise_for_status()
                except ClientResponseError as exc:
                    raise CatalogClientError(
                        f"request to {url} failed: {exc.message}", status=exc.status
                    ) from exc
                return await resp.json()
        except ClientError as exc:
            raise CatalogClientError(f"request to {url} failed: {exc}") from exc

    async def _headers(self, method: str, url: str) -> Dict[str, str]:
        headers = {"accept": "application/json"}
        key = await self._signing_key()
        if key is None:
            return headers
        return sign_request(key, method, url, headers)

    async def _signing_key(self) -> Optional[SigningKey]:
        key = self._config.signing_key
        credentials = self._config.credentials
        if key is None or credentials is None:
            return key
        # Re-derived per request so that rotated credentials are picked up.
        try:
            snapshot = await credentials.get_credential()
        except (ProviderError, ProviderUnavailableError) as exc:
            raise CredentialFailureError(exc) from exc
        return SigningKey.from_credentials(
            snapshot, region=key.region, service=key.service
        )


class RestCatalogList(CatalogList):
    """
    Iceberg REST catalogs addressed by prefix. The prefix advertised by
    ``/v1/config`` is exposed as the catalog name; a server that advertises
    none serves a single catalog named after the config.
    """

    def __init__(self, config: CatalogClientConfig, client: "ClientSession") -> None:
        super().__init__(config)
        self._name = config.name or DEFAULT_CATALOG_NAME
        self._prefixed = True
        self._rest = RestCatalogClient(config=config, client=client)

    async def list_catalogs(self) -> List[str]:
        payload = await self._rest.get_config()
        overrides = payload.get("overrides") or {}
        defaults = payload.get("defaults") or {}
        prefix = overrides.get("prefix") or defaults.get("prefix")
        self._prefixed = bool(prefix)
        return [prefix] if prefix else [self._name]

    async def list_namespaces(self, catalog: str) -> List[str]:
        if not self._prefixed and catalog == self._name:
            return await self._rest.list_namespaces()
        return await self._rest.list_namespaces(prefix=catalog)


class RestNoPrefixCatalogList(CatalogList):
    """A single REST catalog served without a path prefix."""

    def __init__(self, config: CatalogClientConfig, client: "ClientSession") -> None:
        super().__init__(config)
        self._name = config.name or DEFAULT_CATALOG_NAME
        self._rest = RestCatalogClient(config=config, client=client)

    async def list_catalogs(self) -> List[str]:
        return [self._name]

    async def list_namespaces(self, catalog: str) -> List[str]:
        if catalog != self._name:
            raise CatalogClientError(f"Catalog {catalog} does not exist.")
        return await self._rest.list_namespaces()
