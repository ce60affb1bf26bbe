"""
Typed errors raised by the storage and export layers.

Each error carries a ``kind`` and the HTTP status the API boundary maps it
to, so handlers never have to inspect driver exceptions.
"""
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DUPLICATE_MATRIC_NUMBER = "duplicate_matric_number"
    DUPLICATE_NAME = "duplicate_name"
    NOT_FOUND = "not_found"


class SubmissionError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION
    status_code: int = 400
    default_message: str = "Invalid submission"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidDisciplineError(SubmissionError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "Discipline must be either linguistics or communication"


class UnsupportedExportFormatError(SubmissionError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "Unsupported export format. Use csv or docx."


class DuplicateMatricNumberError(SubmissionError):
    kind = ErrorKind.DUPLICATE_MATRIC_NUMBER
    status_code = 409
    default_message = "This matric number has already been used"


class DuplicateNameError(SubmissionError):
    kind = ErrorKind.DUPLICATE_NAME
    status_code = 409
    default_message = "A submission with this full name already exists"


class SubmissionNotFoundError(SubmissionError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Submission not found"


class NoSubmissionsError(SubmissionError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "No submissions found"
