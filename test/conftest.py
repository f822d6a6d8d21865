from typing import Iterator

import pytest


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # Keep the developer's AWS and catalog settings out of the tests.
    for name in (
        "ICEBERG_CATALOG_URL",
        "ICEBERG_CATALOG_USER",
        "ICEBERG_CATALOG_PASSWORD",
        "FROSTBOW_STORAGE",
        "FROSTBOW_LOG_LEVEL",
        "AWS_PROFILE",
        "AWS_ENDPOINT_URL",
        "AWS_DEFAULT_REGION",
        "AWS_REGION",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", "/dev/null")
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", "/dev/null")
    yield
