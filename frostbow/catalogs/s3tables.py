import logging
from typing import Any, Dict, List

from frostbow.catalogs.base import CatalogList
from frostbow.contracts.catalogs import CatalogClientConfig
from frostbow.exceptions.exceptions import (
    CatalogClientError,
    ProviderUnavailableError,
)
from frostbow.utils.async_utils import run_blocking


logger = logging.getLogger(__name__)


class S3TablesCatalogList(CatalogList):
    """One catalog per table bucket, listed through the S3 Tables API."""

    def __init__(self, config: CatalogClientConfig) -> None:
        super().__init__(config)
        self._arn = config.base_path
        self._name = config.name or config.base_path

    async def list_catalogs(self) -> List[str]:
        return [self._name]

    async def list_namespaces(self, catalog: str) -> List[str]:
        from botocore.exceptions import BotoCoreError, ClientError

        if catalog != self._name:
            raise CatalogClientError(f"Catalog {catalog} does not exist.")
        client = await self._create_client()
        namespaces: List[str] = []
        kwargs: Dict[str, Any] = {"tableBucketARN": self._arn}
        while True:
            try:
                resp = await run_blocking(client.list_namespaces, **kwargs)
            except (BotoCoreError, ClientError) as exc:
                raise CatalogClientError(
                    f"failed to list namespaces of {self._arn}: {exc}"
                ) from exc
            namespaces.extend(
                ".".join(ns["namespace"]) for ns in resp.get("namespaces", [])
            )
            token = resp.get("continuationToken")
            if not token:
                return namespaces
            kwargs["continuationToken"] = token

    async def _create_client(self) -> Any:
        import boto3

        if self._config.credentials is None:
            raise ProviderUnavailableError()
        credentials = await self._config.credentials.get_credential()
        logger.debug(f"Creating s3tables client in {self._config.region}")
        return await run_blocking(
            boto3.client,
            "s3tables",
            region_name=self._config.region,
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key,
            aws_session_token=credentials.session_token,
        )
