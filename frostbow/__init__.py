__version__ = "0.1.0"

from .catalogs.resolver import CatalogResolver, classify_locator  # noqa
from .contracts.aws import CredentialSnapshot, SigningKey  # noqa
from .contracts.catalogs import CatalogClientConfig, CatalogKind  # noqa
from .credentials import CredentialCache, CredentialProvider  # noqa
from .session import CatalogSessionContext  # noqa
from .storage import ObjectStore, StorageResolver  # noqa
