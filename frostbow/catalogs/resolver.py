import logging
from typing import Awaitable, Callable, Dict, Optional, Sequence, Tuple

from yarl import URL

from frostbow.config.config import BasicAuthConfig
from frostbow.contracts.aws import SigningKey, TableBucketArn
from frostbow.contracts.catalogs import CatalogClientConfig, CatalogKind
from frostbow.credentials import CredentialCache
from frostbow.exceptions.exceptions import (
    CredentialFailureError,
    InvalidLocatorError,
    MissingRegionError,
    ProviderError,
    ProviderUnavailableError,
)
from frostbow.storage import ObjectStore


logger = logging.getLogger(__name__)

FILE_MARKERS = ("s3://", "gs://", "file://")
ARN_MARKER = "arn:"
GLUE_MARKER = "https://glue"
S3TABLES_MARKER = "https://s3tables"

PROVIDER_DOMAIN = "amazonaws.com"
DEFAULT_PATH = "iceberg"

GLUE_SERVICE = "glue"
S3TABLES_SERVICE = "s3tables"
GLUE_CATALOG_NAME = "iceberg"

# Evaluated in order, the first matching prefix wins.
_RULES: Sequence[Tuple[Tuple[str, ...], CatalogKind]] = (
    (FILE_MARKERS, CatalogKind.FILE),
    ((ARN_MARKER,), CatalogKind.ARN_TABLE_BUCKET),
    ((GLUE_MARKER,), CatalogKind.MANAGED_METASTORE),
    ((S3TABLES_MARKER,), CatalogKind.MANAGED_TABLE_BUCKET_REST),
)


def classify_locator(locator: str) -> CatalogKind:
    for markers, kind in _RULES:
        if locator.startswith(markers):
            return kind
    return CatalogKind.GENERIC_REST


def complete_host(locator: str, marker: str, region: Optional[str]) -> str:
    """
    Expands a bare service marker such as ``https://glue`` into the regional
    endpoint ``https://glue.<region>.amazonaws.com/iceberg``. Any other
    locator is returned unchanged.
    """
    if locator != marker:
        return locator
    if not region:
        raise MissingRegionError("region")
    return f"{marker}.{region}.{PROVIDER_DOMAIN}/{DEFAULT_PATH}"


_Resolve = Callable[[str, ObjectStore], Awaitable[CatalogClientConfig]]


class CatalogResolver:
    def __init__(
        self,
        credentials: CredentialCache,
        *,
        region: Optional[str] = None,
        basic_auth: Optional[BasicAuthConfig] = None,
    ) -> None:
        self._credentials = credentials
        self._region = region
        self._basic_auth = basic_auth
        self._resolvers: Dict[CatalogKind, _Resolve] = {
            CatalogKind.FILE: self._resolve_file,
            CatalogKind.ARN_TABLE_BUCKET: self._resolve_table_bucket_arn,
            CatalogKind.MANAGED_METASTORE: self._resolve_glue,
            CatalogKind.MANAGED_TABLE_BUCKET_REST: self._resolve_s3tables_rest,
            CatalogKind.GENERIC_REST: self._resolve_rest,
        }

    @property
    def kinds(self) -> Sequence[CatalogKind]:
        return tuple(self._resolvers)

    async def resolve(self, locator: str, storage: ObjectStore) -> CatalogClientConfig:
        if not locator or not locator.strip():
            raise InvalidLocatorError(locator, "locator is empty")
        kind = classify_locator(locator)
        return await self._resolvers[kind](locator, storage)

    async def _resolve_file(
        self, locator: str, storage: ObjectStore
    ) -> CatalogClientConfig:
        logger.info(f"Using file catalog with URL: {locator}")
        return CatalogClientConfig(
            kind=CatalogKind.FILE, base_path=locator, storage=storage
        )

    async def _resolve_table_bucket_arn(
        self, locator: str, storage: ObjectStore
    ) -> CatalogClientConfig:
        logger.info(f"Using S3 tables catalog with ARN: {locator}")
        arn = TableBucketArn.parse(locator)
        region = arn.region or self._region
        if not region:
            raise MissingRegionError("region")
        return CatalogClientConfig(
            kind=CatalogKind.ARN_TABLE_BUCKET,
            base_path=arn.arn,
            storage=storage,
            region=region,
            credentials=self._credentials,
            name=arn.bucket,
        )

    async def _resolve_glue(
        self, locator: str, storage: ObjectStore
    ) -> CatalogClientConfig:
        logger.info(f"Using Glue catalog with URL: {locator}")
        return await self._resolve_signed(
            CatalogKind.MANAGED_METASTORE,
            locator,
            storage,
            marker=GLUE_MARKER,
            service=GLUE_SERVICE,
            name=GLUE_CATALOG_NAME,
        )

    async def _resolve_s3tables_rest(
        self, locator: str, storage: ObjectStore
    ) -> CatalogClientConfig:
        logger.info(f"Using S3 tables REST catalog with URL: {locator}")
        return await self._resolve_signed(
            CatalogKind.MANAGED_TABLE_BUCKET_REST,
            locator,
            storage,
            marker=S3TABLES_MARKER,
            service=S3TABLES_SERVICE,
        )

    async def _resolve_rest(
        self, locator: str, storage: ObjectStore
    ) -> CatalogClientConfig:
        logger.info(f"Using REST catalog with URL: {locator}")
        try:
            url = URL(locator)
        except ValueError as exc:
            raise InvalidLocatorError(locator, str(exc)) from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidLocatorError(locator, "expected an http(s) URL")
        return CatalogClientConfig(
            kind=CatalogKind.GENERIC_REST,
            base_path=locator,
            storage=storage,
            basic_auth=self._basic_auth,
        )

    async def _resolve_signed(
        self,
        kind: CatalogKind,
        locator: str,
        storage: ObjectStore,
        *,
        marker: str,
        service: str,
        name: Optional[str] = None,
    ) -> CatalogClientConfig:
        base_path = complete_host(locator, marker, self._region)
        if not self._region:
            raise MissingRegionError("region")
        signing_key = await self._derive_signing_key(self._region, service)
        return CatalogClientConfig(
            kind=kind,
            base_path=base_path,
            storage=storage,
            signing_key=signing_key,
            region=self._region,
            credentials=self._credentials,
            name=name,
        )

    async def _derive_signing_key(self, region: str, service: str) -> SigningKey:
        try:
            credentials = await self._credentials.get_credential()
        except (ProviderError, ProviderUnavailableError) as exc:
            raise CredentialFailureError(exc) from exc
        return SigningKey.from_credentials(
            credentials, region=region, service=service
        )
