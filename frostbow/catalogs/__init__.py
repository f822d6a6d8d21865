from typing import TYPE_CHECKING, Callable, Dict

from frostbow.catalogs.base import CatalogList
from frostbow.catalogs.file import FileCatalogList
from frostbow.catalogs.rest import RestCatalogList, RestNoPrefixCatalogList
from frostbow.catalogs.s3tables import S3TablesCatalogList
from frostbow.contracts.catalogs import CatalogClientConfig, CatalogKind


if TYPE_CHECKING:
    from aiohttp import ClientSession


_Constructor = Callable[[CatalogClientConfig, "ClientSession"], CatalogList]

CONSTRUCTORS: Dict[CatalogKind, _Constructor] = {
    CatalogKind.FILE: lambda config, _: FileCatalogList(config),
    CatalogKind.ARN_TABLE_BUCKET: lambda config, _: S3TablesCatalogList(config),
    CatalogKind.MANAGED_METASTORE: RestNoPrefixCatalogList,
    CatalogKind.MANAGED_TABLE_BUCKET_REST: RestCatalogList,
    CatalogKind.GENERIC_REST: RestCatalogList,
}


def create_catalog_list(
    config: CatalogClientConfig, client: "ClientSession"
) -> CatalogList:
    return CONSTRUCTORS[config.kind](config, client)
