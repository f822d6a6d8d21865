from typing import Optional

import pytest
from yarl import URL

from frostbow.config import AwsConfig, BasicAuthConfig, load_config
from frostbow.config.config import get_basic_auth
from frostbow.exceptions.exceptions import ConfigError, MissingConfigurationError


class TestLoadConfig:
    def test_missing_catalog_url(self) -> None:
        with pytest.raises(MissingConfigurationError) as exc_info:
            load_config(environ={})
        assert exc_info.value.name == "ICEBERG_CATALOG_URL"

    def test_from_environment(self) -> None:
        config = load_config(
            environ={
                "ICEBERG_CATALOG_URL": "https://glue",
                "FROSTBOW_STORAGE": "gcs",
                "AWS_ENDPOINT_URL": "http://localhost:9000",
            },
            region="eu-west-1",
        )

        assert config.catalog_url == "https://glue"
        assert config.storage == "gcs"
        assert config.aws == AwsConfig(
            region="eu-west-1", endpoint_url=URL("http://localhost:9000")
        )
        assert config.basic_auth is None

    def test_explicit_values_win(self) -> None:
        config = load_config(
            catalog_url="s3://bucket/warehouse",
            storage="file",
            region="us-east-1",
            environ={"ICEBERG_CATALOG_URL": "https://glue", "FROSTBOW_STORAGE": "gcs"},
        )

        assert config.catalog_url == "s3://bucket/warehouse"
        assert config.storage == "file"

    def test_storage_default(self) -> None:
        config = load_config(catalog_url="https://glue", region="us-east-1", environ={})
        assert config.storage == "s3"

    def test_no_storage_default(self) -> None:
        config = load_config(
            catalog_url="https://glue",
            region="us-east-1",
            default_storage=None,
            environ={},
        )
        assert config.storage is None

    def test_region_from_boto_configuration(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-southeast-2")

        config = load_config(catalog_url="https://glue", environ={})

        assert config.aws.region == "ap-southeast-2"

    def test_basic_auth_from_environment(self) -> None:
        config = load_config(
            catalog_url="http://localhost:8181",
            region="us-east-1",
            environ={
                "ICEBERG_CATALOG_USER": "iceberg",
                "ICEBERG_CATALOG_PASSWORD": "secret",
            },
        )

        assert config.basic_auth == BasicAuthConfig(
            username="iceberg", password="secret"
        )
        assert "secret" not in repr(config)


class TestBasicAuth:
    def test_neither(self) -> None:
        assert get_basic_auth(None, None) is None

    @pytest.mark.parametrize(
        ("username", "password", "missing"),
        [
            ("iceberg", None, "ICEBERG_CATALOG_PASSWORD"),
            (None, "secret", "ICEBERG_CATALOG_USER"),
        ],
    )
    def test_half_configured(
        self, username: Optional[str], password: Optional[str], missing: str
    ) -> None:
        with pytest.raises(MissingConfigurationError) as exc_info:
            get_basic_auth(username, password)
        assert exc_info.value.name == missing


class TestAwsConfig:
    def test_unknown_profile(self) -> None:
        with pytest.raises(ConfigError):
            AwsConfig(profile="does-not-exist", region="us-east-1").create_session()

    def test_session_carries_region(self) -> None:
        session = AwsConfig(region="eu-north-1").create_session()
        assert session.region_name == "eu-north-1"
