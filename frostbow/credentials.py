import abc
import asyncio
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Optional

from frostbow.contracts.aws import CredentialSnapshot
from frostbow.exceptions.exceptions import ProviderError, ProviderUnavailableError
from frostbow.utils.async_utils import run_blocking


if TYPE_CHECKING:
    import boto3


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CredentialProvider(abc.ABC):
    @abc.abstractmethod
    async def provide_credentials(self) -> CredentialSnapshot:
        pass


class StaticCredentialProvider(CredentialProvider):
    def __init__(self, credentials: CredentialSnapshot) -> None:
        self._credentials = credentials

    async def provide_credentials(self) -> CredentialSnapshot:
        return self._credentials


class BotoCredentialProvider(CredentialProvider):
    """
    Resolves credentials through the boto3 credential chain of a session
    (environment, shared files, SSO, container and instance metadata).
    """

    def __init__(self, session: "boto3.session.Session") -> None:
        self._session = session

    async def provide_credentials(self) -> CredentialSnapshot:
        credentials = await run_blocking(self._session.get_credentials)
        if credentials is None:
            raise ProviderUnavailableError()
        frozen = await run_blocking(credentials.get_frozen_credentials)
        return CredentialSnapshot(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
            expiry=_expiry_of(credentials),
        )


def _expiry_of(credentials: Any) -> Optional[datetime]:
    # _expiry_time is a private botocore attribute of refreshable credentials
    # and may go away; anything else is treated as no expiry.
    expiry = getattr(credentials, "_expiry_time", None)
    if isinstance(expiry, datetime):
        return expiry
    return None


class CredentialCache:
    """
    Caches a credential snapshot in front of a provider.

    The check, the refresh and the read of the snapshot all happen while
    holding one lock, so concurrent callers on an empty or expired cache
    trigger a single exchange and all observe its result. The exchange runs
    in its own task: a caller that gives up waiting does not cancel it, and
    the next caller joins the refresh still in flight.
    """

    def __init__(
        self,
        provider: Optional[CredentialProvider],
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._provider = provider
        self._clock = clock
        self._lock = asyncio.Lock()
        self._snapshot: Optional[CredentialSnapshot] = None
        self._refresh: "Optional[asyncio.Task[CredentialSnapshot]]" = None

    @property
    def is_valid(self) -> bool:
        return self._snapshot is not None and not self._snapshot.is_expired(
            self._clock()
        )

    async def get_credential(self) -> CredentialSnapshot:
        async with self._lock:
            snapshot = self._snapshot
            if snapshot is None or snapshot.is_expired(self._clock()):
                return await asyncio.shield(self._start_refresh())
            return snapshot

    def _start_refresh(self) -> "asyncio.Task[CredentialSnapshot]":
        if self._provider is None:
            raise ProviderUnavailableError()
        if self._refresh is None:
            self._refresh = asyncio.ensure_future(self._exchange(self._provider))
            self._refresh.add_done_callback(_log_refresh_failure)
        return self._refresh

    async def _exchange(self, provider: CredentialProvider) -> CredentialSnapshot:
        try:
            logger.debug("Refreshing credentials")
            try:
                snapshot = await provider.provide_credentials()
            except (ProviderError, ProviderUnavailableError):
                raise
            except Exception as exc:
                raise ProviderError(exc) from exc
            if snapshot.expiry is not None and snapshot.expiry.tzinfo is None:
                raise ProviderError(ValueError("expiry must be timezone-aware"))
            if snapshot.is_expired(self._clock()):
                raise ProviderError(
                    ValueError(f"provider returned credentials expired at {snapshot.expiry}")
                )
            self._snapshot = snapshot
            logger.debug(f"Refreshed credentials, expiry: {snapshot.expiry}")
            return snapshot
        finally:
            self._refresh = None


def _log_refresh_failure(task: "asyncio.Task[CredentialSnapshot]") -> None:
    # Retrieves the exception of refreshes whose callers went away.
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Credentials refresh failed: {exc}")
