import asyncio
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from frostbow.credentials import (
    BotoCredentialProvider,
    CredentialCache,
    StaticCredentialProvider,
)
from frostbow.exceptions.exceptions import ProviderError, ProviderUnavailableError
from test.unit.credentials_test_utils import (
    START,
    CountingProvider,
    FakeClock,
    new_snapshot,
)


pytestmark = pytest.mark.asyncio


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def provider(clock: FakeClock) -> CountingProvider:
    return CountingProvider(clock)


@pytest.fixture()
def cache(provider: CountingProvider, clock: FakeClock) -> CredentialCache:
    return CredentialCache(provider, clock=clock)


class TestCredentialCache:
    async def test_concurrent_callers_on_empty_cache_share_one_exchange(
        self, clock: FakeClock
    ) -> None:
        gate = asyncio.Event()
        provider = CountingProvider(clock, gate=gate)
        cache = CredentialCache(provider, clock=clock)

        tasks = [asyncio.ensure_future(cache.get_credential()) for _ in range(20)]
        await asyncio.sleep(0)
        gate.set()
        snapshots = await asyncio.gather(*tasks)

        assert provider.calls == 1
        assert all(snapshot is snapshots[0] for snapshot in snapshots)
        assert snapshots[0].access_key_id == "key-1"

    async def test_calls_before_expiry_hit_the_cache(
        self, cache: CredentialCache, provider: CountingProvider, clock: FakeClock
    ) -> None:
        first = await cache.get_credential()
        clock.advance(14 * 60)
        second = await cache.get_credential()

        assert provider.calls == 1
        assert second is first

    async def test_call_at_expiry_refreshes(
        self, cache: CredentialCache, provider: CountingProvider, clock: FakeClock
    ) -> None:
        await cache.get_credential()
        clock.advance(15 * 60)

        refreshed = await cache.get_credential()

        assert provider.calls == 2
        assert refreshed.access_key_id == "key-2"
        assert refreshed.expiry is not None
        assert refreshed.expiry > clock()

    async def test_concurrent_callers_after_expiry_refresh_once(
        self, clock: FakeClock
    ) -> None:
        provider = CountingProvider(clock)
        cache = CredentialCache(provider, clock=clock)
        await cache.get_credential()
        clock.advance(60 * 60)

        snapshots = await asyncio.gather(*(cache.get_credential() for _ in range(10)))

        assert provider.calls == 2
        assert {snapshot.access_key_id for snapshot in snapshots} == {"key-2"}

    async def test_snapshot_without_expiry_never_refreshes(
        self, clock: FakeClock
    ) -> None:
        provider = CountingProvider(clock, lifetime=None)
        cache = CredentialCache(provider, clock=clock)

        await cache.get_credential()
        clock.advance(365 * 24 * 60 * 60)
        snapshot = await cache.get_credential()

        assert provider.calls == 1
        assert snapshot.expiry is None

    async def test_missing_provider_is_unavailable(self) -> None:
        cache = CredentialCache(None)

        with pytest.raises(ProviderUnavailableError):
            await cache.get_credential()

    async def test_provider_failure_leaves_cache_untouched(
        self, cache: CredentialCache, provider: CountingProvider, clock: FakeClock
    ) -> None:
        first = await cache.get_credential()
        clock.advance(20 * 60)
        provider.errors.append(RuntimeError("sts unreachable"))

        with pytest.raises(ProviderError) as exc_info:
            await cache.get_credential()

        assert isinstance(exc_info.value.cause, RuntimeError)
        assert not cache.is_valid

        retried = await cache.get_credential()
        assert retried is not first
        assert provider.calls == 3

    async def test_expired_snapshot_from_provider_is_rejected(
        self, clock: FakeClock
    ) -> None:
        stale = new_snapshot(expiry=START - timedelta(seconds=1))
        cache = CredentialCache(StaticCredentialProvider(stale), clock=clock)

        with pytest.raises(ProviderError):
            await cache.get_credential()
        assert not cache.is_valid

    async def test_expiry_without_timezone_is_rejected(
        self, clock: FakeClock
    ) -> None:
        naive = new_snapshot(expiry=datetime(2026, 1, 1, 13, 0, 0))
        cache = CredentialCache(StaticCredentialProvider(naive), clock=clock)

        with pytest.raises(ProviderError) as exc_info:
            await cache.get_credential()

        assert isinstance(exc_info.value.cause, ValueError)
        assert not cache.is_valid

    async def test_refresh_result_is_the_cached_snapshot(
        self, cache: CredentialCache
    ) -> None:
        refreshed = await cache.get_credential()
        assert await cache.get_credential() is refreshed

    async def test_abandoned_caller_does_not_cancel_refresh(
        self, clock: FakeClock
    ) -> None:
        gate = asyncio.Event()
        provider = CountingProvider(clock, gate=gate)
        cache = CredentialCache(provider, clock=clock)

        abandoned = asyncio.ensure_future(cache.get_credential())
        await asyncio.sleep(0)
        abandoned.cancel()
        with pytest.raises(asyncio.CancelledError):
            await abandoned

        waiting = asyncio.ensure_future(cache.get_credential())
        await asyncio.sleep(0)
        gate.set()
        snapshot = await waiting

        assert provider.calls == 1
        assert snapshot.access_key_id == "key-1"
        assert cache.is_valid


class _FrozenCredentials(SimpleNamespace):
    pass


def _boto_session(credentials: Optional[Any]) -> MagicMock:
    session = MagicMock()
    session.get_credentials.return_value = credentials
    return session


class TestBotoCredentialProvider:
    async def test_static_credentials_have_no_expiry(self) -> None:
        credentials = MagicMock(spec=["get_frozen_credentials"])
        credentials.get_frozen_credentials.return_value = _FrozenCredentials(
            access_key="AKID", secret_key="secret", token=None
        )

        snapshot = await BotoCredentialProvider(
            _boto_session(credentials)
        ).provide_credentials()

        assert snapshot.access_key_id == "AKID"
        assert snapshot.secret_access_key == "secret"
        assert snapshot.session_token is None
        assert snapshot.expiry is None

    async def test_refreshable_credentials_carry_expiry(self) -> None:
        expiry = START + timedelta(hours=1)
        credentials = MagicMock(spec=["get_frozen_credentials", "_expiry_time"])
        credentials._expiry_time = expiry
        credentials.get_frozen_credentials.return_value = _FrozenCredentials(
            access_key="ASIA", secret_key="secret", token="session"
        )

        snapshot = await BotoCredentialProvider(
            _boto_session(credentials)
        ).provide_credentials()

        assert snapshot.session_token == "session"
        assert snapshot.expiry == expiry

    async def test_unexpected_expiry_attribute_is_ignored(self) -> None:
        credentials = MagicMock(spec=["get_frozen_credentials", "_expiry_time"])
        credentials._expiry_time = "2026-01-01T13:00:00Z"
        credentials.get_frozen_credentials.return_value = _FrozenCredentials(
            access_key="ASIA", secret_key="secret", token="session"
        )

        snapshot = await BotoCredentialProvider(
            _boto_session(credentials)
        ).provide_credentials()

        assert snapshot.expiry is None

    async def test_empty_credential_chain_is_unavailable(self) -> None:
        cache = CredentialCache(BotoCredentialProvider(_boto_session(None)))

        with pytest.raises(ProviderUnavailableError):
            await cache.get_credential()
