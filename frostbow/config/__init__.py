from .config import (  # noqa
    DEFAULT_LOG_LEVEL,
    DEFAULT_STORAGE,
    ENV_CATALOG_URL,
    ENV_LOG_LEVEL,
    AwsConfig,
    BasicAuthConfig,
    Config,
    load_config,
)
