import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Optional

from yarl import URL

from frostbow.exceptions.exceptions import ConfigError, MissingConfigurationError


if TYPE_CHECKING:
    import boto3


ENV_CATALOG_URL = "ICEBERG_CATALOG_URL"
ENV_CATALOG_USER = "ICEBERG_CATALOG_USER"
ENV_CATALOG_PASSWORD = "ICEBERG_CATALOG_PASSWORD"
ENV_STORAGE = "FROSTBOW_STORAGE"
ENV_LOG_LEVEL = "FROSTBOW_LOG_LEVEL"
ENV_AWS_PROFILE = "AWS_PROFILE"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"

DEFAULT_STORAGE = "s3"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class BasicAuthConfig:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class AwsConfig:
    region: Optional[str] = None
    endpoint_url: Optional[URL] = None
    profile: Optional[str] = None

    @classmethod
    def load(
        cls,
        *,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        profile: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "AwsConfig":
        """
        Resolves the ambient AWS settings. Explicit values win over the
        environment, and the region falls back to whatever the boto3
        configuration chain (env, shared config file) provides.
        """
        if environ is None:
            environ = os.environ
        profile = profile or environ.get(ENV_AWS_PROFILE) or None
        if not region:
            region = cls(profile=profile).create_session().region_name
        endpoint = endpoint_url or environ.get(ENV_AWS_ENDPOINT_URL)
        return cls(
            region=region or None,
            endpoint_url=URL(endpoint) if endpoint else None,
            profile=profile,
        )

    def create_session(self) -> "boto3.session.Session":
        import boto3
        from botocore.exceptions import ProfileNotFound

        try:
            return boto3.session.Session(
                profile_name=self.profile, region_name=self.region
            )
        except ProfileNotFound as exc:
            raise ConfigError(str(exc)) from exc


@dataclass(frozen=True)
class Config:
    catalog_url: str
    aws: AwsConfig
    storage: Optional[str] = None
    basic_auth: Optional[BasicAuthConfig] = None


def get_basic_auth(
    username: Optional[str], password: Optional[str]
) -> Optional[BasicAuthConfig]:
    if not username and not password:
        return None
    if not username:
        raise MissingConfigurationError(ENV_CATALOG_USER)
    if not password:
        raise MissingConfigurationError(ENV_CATALOG_PASSWORD)
    return BasicAuthConfig(username=username, password=password)


def load_config(
    *,
    catalog_url: Optional[str] = None,
    storage: Optional[str] = None,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    profile: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    default_storage: Optional[str] = DEFAULT_STORAGE,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    if environ is None:
        environ = os.environ

    catalog_url = catalog_url or environ.get(ENV_CATALOG_URL)
    if not catalog_url:
        raise MissingConfigurationError(ENV_CATALOG_URL)

    return Config(
        catalog_url=catalog_url,
        aws=AwsConfig.load(
            region=region,
            endpoint_url=endpoint_url,
            profile=profile,
            environ=environ,
        ),
        storage=storage or environ.get(ENV_STORAGE) or default_storage,
        basic_auth=get_basic_auth(
            username or environ.get(ENV_CATALOG_USER),
            password or environ.get(ENV_CATALOG_PASSWORD),
        ),
    )
