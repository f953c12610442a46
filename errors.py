"""Error taxonomy shared by the repositories and the API handlers.

Every error carries a short machine readable ``code`` (used as the ``comment``
field of API responses, like the rest of the API) and the HTTP status the
presentation layer answers with.
"""


class CatalogError(Exception):
    """Base class for all failures raised by the catalog core."""
    code = 'CATALOG_ERROR'
    status = 500

    def __init__(self, message: str = ''):
        super().__init__(message or self.code)
        self.message = message or self.code


class NotFoundError(CatalogError):
    """The referenced record or key does not exist."""
    code = 'NOT_FOUND'
    status = 404


class UnauthorizedError(CatalogError):
    """The acting identity is not the owner/author of the record."""
    code = 'UNAUTHORIZED'
    status = 403


class ValidationFailedError(CatalogError):
    """Malformed input reached the core boundary."""
    code = 'VALIDATION_FAILED'
    status = 400


class StoreUnavailableError(CatalogError):
    """Transport or backend failure on a blob/document store call."""
    code = 'STORE_UNAVAILABLE'
    status = 503


class PartialFailureError(CatalogError):
    """A multi-step operation completed some, but not all, of its steps.

    Nothing is rolled back; ``completed`` lists the steps that did happen and
    ``result`` holds whatever the operation produced before failing.
    """
    code = 'PARTIAL_FAILURE'
    status = 500

    def __init__(self, message: str = '', completed: list[str] | None = None, result=None):
        super().__init__(message)
        self.completed = completed or []
        self.result = result
