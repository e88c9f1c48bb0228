class OctogateError(Exception):
    pass


class MissingInputError(OctogateError):
    pass


class UnauthorizedError(OctogateError):
    pass


class InvalidStateError(OctogateError):
    pass


class CsrfMismatchError(InvalidStateError):
    pass


class OAuthError(OctogateError):
    pass


class ProviderError(OAuthError):
    pass


class BackendError(OctogateError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(OctogateError):
    pass
