import logging
from typing import TYPE_CHECKING, Callable, Dict, Optional

from frostbow.config.config import AwsConfig
from frostbow.contracts.storage import (
    CloudStorage,
    InMemoryStorage,
    LocalStorage,
    StorageKind,
    StorageSelector,
)
from frostbow.credentials import CredentialCache
from frostbow.exceptions.exceptions import (
    ProviderUnavailableError,
    UnsupportedStorageError,
)


if TYPE_CHECKING:
    import pyarrow.fs


logger = logging.getLogger(__name__)


class ObjectStore:
    """
    Handle to an object store. The filesystem is opened lazily; for S3 a new
    filesystem is signed with the current credentials each time it is opened.
    """

    def __init__(
        self,
        selector: StorageSelector,
        credentials: Optional[CredentialCache] = None,
    ) -> None:
        self._selector = selector
        self._credentials = credentials
        self._filesystem: Optional["pyarrow.fs.FileSystem"] = None

    @property
    def selector(self) -> StorageSelector:
        return self._selector

    @property
    def kind(self) -> StorageKind:
        return self._selector.kind

    @property
    def credentials(self) -> Optional[CredentialCache]:
        return self._credentials

    async def filesystem(self) -> "pyarrow.fs.FileSystem":
        if isinstance(self._selector, CloudStorage) and self.kind == StorageKind.S3:
            return await self._s3_filesystem(self._selector)
        if self._filesystem is None:
            self._filesystem = self._create_filesystem()
        return self._filesystem

    def _create_filesystem(self) -> "pyarrow.fs.FileSystem":
        from pyarrow import fs

        if isinstance(self._selector, InMemoryStorage):
            from fsspec.implementations.memory import MemoryFileSystem

            return fs.PyFileSystem(fs.FSSpecHandler(MemoryFileSystem()))
        if isinstance(self._selector, LocalStorage):
            local = fs.LocalFileSystem()
            if self._selector.root is None:
                return local
            return fs.SubTreeFileSystem(str(self._selector.root), local)
        return fs.GcsFileSystem()

    async def _s3_filesystem(self, selector: CloudStorage) -> "pyarrow.fs.FileSystem":
        from pyarrow import fs

        if self._credentials is None:
            raise ProviderUnavailableError()
        credentials = await self._credentials.get_credential()
        return fs.S3FileSystem(
            access_key=credentials.access_key_id,
            secret_key=credentials.secret_access_key,
            session_token=credentials.session_token,
            region=selector.region,
            endpoint_override=str(selector.endpoint_url)
            if selector.endpoint_url
            else None,
        )

    def __repr__(self) -> str:
        return f"ObjectStore({self._selector!r})"


class StorageResolver:
    def __init__(
        self, aws: AwsConfig, credentials: Optional[CredentialCache] = None
    ) -> None:
        self._aws = aws
        self._credentials = credentials
        self._selectors: Dict[str, Callable[[], StorageSelector]] = {
            "file": LocalStorage,
            "s3": self._s3,
            "aws": self._s3,
            "gcs": self._gcs,
        }

    def select(self, name: Optional[str]) -> StorageSelector:
        if name is None:
            return InMemoryStorage()
        create = self._selectors.get(name)
        if create is None:
            raise UnsupportedStorageError(name)
        return create()

    def resolve(self, name: Optional[str]) -> ObjectStore:
        selector = self.select(name)
        logger.info(f"Initializing storage with provider: {selector.kind}")
        if selector.kind == StorageKind.S3:
            if self._credentials is None:
                raise ProviderUnavailableError()
            return ObjectStore(selector, credentials=self._credentials)
        return ObjectStore(selector)

    def _s3(self) -> StorageSelector:
        return CloudStorage(
            kind=StorageKind.S3,
            region=self._aws.region,
            endpoint_url=self._aws.endpoint_url,
        )

    def _gcs(self) -> StorageSelector:
        return CloudStorage(kind=StorageKind.GCS)
