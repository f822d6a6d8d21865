"""
Command line entry point: resolves the configured catalog and prints its
catalogs and namespaces. It does not run queries, so it never builds a
:class:`frostbow.session.CatalogSessionContext`; the query engine wraps its own
session with one.
"""

import asyncio
import logging
import os
import sys
from argparse import ArgumentParser
from typing import TYPE_CHECKING, Optional, Sequence

from frostbow.catalogs import CatalogList, create_catalog_list
from frostbow.catalogs.resolver import CatalogResolver
from frostbow.config import DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL, Config, load_config
from frostbow.contracts.catalogs import CatalogClientConfig
from frostbow.credentials import BotoCredentialProvider, CredentialCache
from frostbow.exceptions.exceptions import FrostbowError
from frostbow.storage import StorageResolver
from frostbow.utils.async_utils import run_blocking


if TYPE_CHECKING:
    from rich.console import Console


logger = logging.getLogger(__name__)


def create_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="frostbow",
        description="Resolve an Iceberg catalog and list its namespaces.",
    )
    parser.add_argument(
        "-u", "--catalog-url", help="The URL of the catalog (ICEBERG_CATALOG_URL)."
    )
    parser.add_argument(
        "-s",
        "--storage",
        help="The storage backend to use. Can be 'file', 's3', 'aws' or 'gcs'. "
        "Defaults to 's3' if not set.",
    )
    parser.add_argument("--region", help="AWS region, overrides the ambient one.")
    parser.add_argument("--endpoint-url", help="Object store endpoint override.")
    parser.add_argument("--profile", help="AWS profile to load credentials from.")
    parser.add_argument("--user", help="Basic auth user of a REST catalog.")
    parser.add_argument(
        "--password",
        help="Basic auth password of a REST catalog (ICEBERG_CATALOG_PASSWORD).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def setup_logging(level: str) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


async def bootstrap(config: Config) -> CatalogClientConfig:
    session = await run_blocking(config.aws.create_session)
    credentials = CredentialCache(BotoCredentialProvider(session))
    storage = StorageResolver(config.aws, credentials).resolve(config.storage)
    resolver = CatalogResolver(
        credentials, region=config.aws.region, basic_auth=config.basic_auth
    )
    return await resolver.resolve(config.catalog_url, storage)


async def show_catalogs(catalog_list: CatalogList, console: "Console") -> None:
    from rich.table import Table

    table = Table("Catalog", "Namespace")
    for catalog in await catalog_list.list_catalogs():
        namespaces = await catalog_list.list_namespaces(catalog)
        if not namespaces:
            table.add_row(catalog, "")
        for namespace in namespaces:
            table.add_row(catalog, namespace)
    console.print(table)


async def run(config: Config, console: "Console") -> None:
    from aiohttp import ClientSession

    catalog_config = await bootstrap(config)
    async with ClientSession() as client:
        catalog_list = create_catalog_list(catalog_config, client)
        await show_catalogs(catalog_list, console)


def main(argv: Optional[Sequence[str]] = None) -> int:
    from rich.console import Console

    args = create_parser().parse_args(argv)
    setup_logging(
        "DEBUG" if args.verbose else os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)
    )
    try:
        config = load_config(
            catalog_url=args.catalog_url,
            storage=args.storage,
            region=args.region,
            endpoint_url=args.endpoint_url,
            profile=args.profile,
            username=args.user,
            password=args.password,
        )
        asyncio.run(run(config, Console()))
    except FrostbowError as e:
        logger.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
