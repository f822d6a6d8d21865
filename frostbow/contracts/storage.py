import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from yarl import URL


@enum.unique
class StorageKind(enum.Enum):
    MEMORY = "memory"
    FILE = "file"
    S3 = "s3"
    GCS = "gcs"

    @property
    def is_cloud(self) -> bool:
        return self in (StorageKind.S3, StorageKind.GCS)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InMemoryStorage:
    @property
    def kind(self) -> StorageKind:
        return StorageKind.MEMORY


@dataclass(frozen=True)
class LocalStorage:
    root: Optional[Path] = None

    @property
    def kind(self) -> StorageKind:
        return StorageKind.FILE


@dataclass(frozen=True)
class CloudStorage:
    kind: StorageKind
    region: Optional[str] = None
    endpoint_url: Optional[URL] = None
    bucket: Optional[str] = None


StorageSelector = Union[InMemoryStorage, LocalStorage, CloudStorage]
