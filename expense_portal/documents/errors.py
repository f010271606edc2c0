class DataAccessError(Exception):
    """Base for every document store failure surfaced to callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DocumentNotFoundError(DataAccessError):
    status_code = 404


class PermissionDeniedError(DataAccessError):
    status_code = 403


class ServiceUnavailableError(DataAccessError):
    status_code = 503


class MissingIndexError(DataAccessError):
    """The query needs a composite index that has not been deployed yet."""

    status_code = 409
