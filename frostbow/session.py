import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Protocol, Type

from yarl import URL


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableOptionsExtension:
    prefix: ClassVar[str] = ""


@dataclass(frozen=True)
class AwsOptions(TableOptionsExtension):
    """Table options for S3 compatible stores (S3, Alibaba OSS, Tencent COS)."""

    prefix: ClassVar[str] = "aws"

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    region: Optional[str] = None
    endpoint: Optional[str] = None
    allow_http: Optional[bool] = None


@dataclass(frozen=True)
class GcpOptions(TableOptionsExtension):
    prefix: ClassVar[str] = "gcp"

    service_account_path: Optional[str] = None
    service_account_key: Optional[str] = None
    application_credentials_path: Optional[str] = None


SCHEME_EXTENSIONS: Mapping[str, Type[TableOptionsExtension]] = {
    "s3": AwsOptions,
    "oss": AwsOptions,
    "cos": AwsOptions,
    "gs": GcpOptions,
    "gcs": GcpOptions,
}


class SessionContext(Protocol):
    """The parts of the query engine session the adapter relies on."""

    def state(self) -> Any:
        ...

    def register_object_store(self, url: URL, store: Any) -> Optional[Any]:
        ...

    def register_table_options_extension(
        self, extension: TableOptionsExtension
    ) -> None:
        ...

    async def execute_logical_plan(self, plan: Any) -> Any:
        ...


PlanRewrite = Callable[[Any], Any]


class CatalogSessionContext:
    """
    Wraps an engine session so that every logical plan passes through the
    catalog rewrite before it is executed.
    """

    def __init__(self, ctx: SessionContext, rewrite: PlanRewrite) -> None:
        self._ctx = ctx
        self._rewrite = rewrite
        self._extensions: Dict[str, TableOptionsExtension] = {}

    @property
    def ctx(self) -> SessionContext:
        return self._ctx

    @property
    def extensions(self) -> Mapping[str, TableOptionsExtension]:
        return dict(self._extensions)

    def session_state(self) -> Any:
        return self._ctx.state()

    def register_object_store(self, url: URL, store: Any) -> Optional[Any]:
        return self._ctx.register_object_store(url, store)

    def register_table_options_extension_from_scheme(self, scheme: str) -> None:
        extension_type = SCHEME_EXTENSIONS.get(scheme)
        if extension_type is None:
            return
        extension = extension_type()
        logger.debug(f"Registering {extension.prefix} table options for {scheme}://")
        # The engine keeps the last registration per prefix.
        self._extensions[extension.prefix] = extension
        self._ctx.register_table_options_extension(extension)

    async def execute_logical_plan(self, plan: Any) -> Any:
        plan = self._rewrite(plan)
        return await self._ctx.execute_logical_plan(plan)
