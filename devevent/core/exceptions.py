"""
Errors raised when an event or booking write is rejected.

Every error carries the offending field and a human-readable message, plus
the HTTP status the API answers with.
"""


class RecordValidationError(Exception):
    status_code = 422

    def __init__(self, field: str | None, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class MissingRequiredField(RecordValidationError):
    pass


class InvalidFormat(RecordValidationError):
    pass


class EmptyCollection(RecordValidationError):
    pass


class DuplicateKey(RecordValidationError):
    status_code = 409


class ReferenceNotFound(RecordValidationError):
    status_code = 404


class ReferenceLookupFailed(RecordValidationError):
    status_code = 500
