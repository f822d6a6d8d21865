from typing import TYPE_CHECKING, List

from yarl import URL

from frostbow.catalogs.base import CatalogList
from frostbow.contracts.catalogs import CatalogClientConfig
from frostbow.exceptions.exceptions import CatalogClientError
from frostbow.utils.async_utils import run_blocking


if TYPE_CHECKING:
    import pyarrow.fs


def filesystem_path(locator: str) -> str:
    """
    Maps a catalog root URL onto a path of the storage filesystem:
    ``s3://bucket/warehouse`` becomes ``bucket/warehouse`` and
    ``file:///data/warehouse`` becomes ``/data/warehouse``.
    """
    url = URL(locator)
    if url.scheme == "file":
        return url.path.rstrip("/") or "/"
    return f"{url.host or ''}{url.path}".rstrip("/")


class FileCatalogList(CatalogList):
    """
    Catalogs stored as plain metadata files: every directory under the root
    is a catalog and every directory below a catalog is a namespace.
    """

    def __init__(self, config: CatalogClientConfig) -> None:
        super().__init__(config)
        self._root = filesystem_path(config.base_path)

    async def list_catalogs(self) -> List[str]:
        return await self._list_dirs(self._root)

    async def list_namespaces(self, catalog: str) -> List[str]:
        return await self._list_dirs(f"{self._root}/{catalog}")

    async def _list_dirs(self, path: str) -> List[str]:
        from pyarrow import fs

        filesystem: "pyarrow.fs.FileSystem" = await self._config.storage.filesystem()
        try:
            infos = await run_blocking(filesystem.get_file_info, fs.FileSelector(path))
        except (FileNotFoundError, OSError) as exc:
            raise CatalogClientError(f"failed to list {path}: {exc}") from exc
        return sorted(
            info.base_name for info in infos if info.type == fs.FileType.Directory
        )
