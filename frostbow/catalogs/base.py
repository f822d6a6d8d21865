import abc
from typing import List

from frostbow.contracts.catalogs import CatalogClientConfig


class CatalogList(abc.ABC):
    def __init__(self, config: CatalogClientConfig) -> None:
        self._config = config

    @property
    def config(self) -> CatalogClientConfig:
        return self._config

    @abc.abstractmethod
    async def list_catalogs(self) -> List[str]:
        pass

    @abc.abstractmethod
    async def list_namespaces(self, catalog: str) -> List[str]:
        pass
