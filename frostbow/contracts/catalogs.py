import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from frostbow.config.config import BasicAuthConfig
from frostbow.contracts.aws import SigningKey


if TYPE_CHECKING:
    from frostbow.credentials import CredentialCache
    from frostbow.storage import ObjectStore


@enum.unique
class CatalogKind(enum.Enum):
    FILE = "file"
    ARN_TABLE_BUCKET = "arn-table-bucket"
    MANAGED_METASTORE = "managed-metastore"
    MANAGED_TABLE_BUCKET_REST = "managed-table-bucket-rest"
    GENERIC_REST = "generic-rest"

    @property
    def is_rest(self) -> bool:
        return self in (
            CatalogKind.MANAGED_METASTORE,
            CatalogKind.MANAGED_TABLE_BUCKET_REST,
            CatalogKind.GENERIC_REST,
        )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CatalogClientConfig:
    kind: CatalogKind
    base_path: str
    storage: "ObjectStore"
    signing_key: Optional[SigningKey] = None
    basic_auth: Optional[BasicAuthConfig] = None
    region: Optional[str] = None
    credentials: Optional["CredentialCache"] = None
    # Set for backends that serve a single catalog without a path prefix.
    name: Optional[str] = None
