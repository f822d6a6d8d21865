from typing import Optional


class FrostbowError(Exception):
    pass


class ConfigError(FrostbowError):
    pass


class MissingConfigurationError(ConfigError):
    def __init__(self, name: str):
        self._name = name
        super().__init__(f"Missing configuration parameter {name}")

    @property
    def name(self) -> str:
        return self._name


class UnsupportedStorageError(ConfigError):
    def __init__(self, name: str):
        self._name = name
        super().__init__(f"Storage {name} is not supported.")

    @property
    def name(self) -> str:
        return self._name


class InvalidLocatorError(ConfigError):
    def __init__(self, locator: str, reason: str = ""):
        self._locator = locator
        message = f"Invalid catalog locator {locator!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)

    @property
    def locator(self) -> str:
        return self._locator


class MissingRegionError(ConfigError):
    def __init__(self, field: str = "region"):
        self._field = field
        super().__init__(f"Region missing, set {field} to resolve it.")

    @property
    def field(self) -> str:
        return self._field


class ProviderUnavailableError(FrostbowError):
    def __init__(self) -> None:
        super().__init__("No credentials provider is configured.")


class ProviderError(FrostbowError):
    def __init__(self, cause: BaseException):
        self._cause = cause
        super().__init__(f"Failed to obtain credentials: {cause}")

    @property
    def cause(self) -> BaseException:
        return self._cause


class CredentialFailureError(FrostbowError):
    """
    Signing material could not be derived because the credentials
    lookup failed. Wraps either a ProviderError or a ProviderUnavailableError.
    """

    def __init__(self, cause: FrostbowError):
        self._cause = cause
        super().__init__(f"Failed to derive signing key: {cause}")

    @property
    def cause(self) -> FrostbowError:
        return self._cause


class CatalogClientError(FrostbowError):
    def __init__(self, error_msg: str, status: Optional[int] = None):
        self._error_msg = error_msg
        self._status = status
        if status is not None:
            super().__init__(f"code: {status}, details: {error_msg}")
        else:
            super().__init__(error_msg)

    @property
    def error_msg(self) -> str:
        return self._error_msg

    @property
    def status(self) -> Optional[int]:
        return self._status
