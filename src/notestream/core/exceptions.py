"""
Domain errors shared by every transport.

Services raise these; the REST layer maps them to status codes with
``status_code`` and GraphQL reports their message in the ``errors`` list.
"""


class NoteStreamError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(NoteStreamError):
    status_code = 401
    default_message = "Not authenticated"


class InvalidCredentials(NotAuthenticated):
    default_message = "Invalid credentials"


class ValidationError(NoteStreamError):
    status_code = 400
    default_message = "Invalid input"


class NotFound(NoteStreamError):
    status_code = 404
    default_message = "Note not found"


class NotAuthorized(NoteStreamError):
    status_code = 403
    default_message = "Not authorized"


class ConflictOrStoreError(NoteStreamError):
    """Uniqueness violations and store connectivity failures."""

    status_code = 500
    default_message = "Store error"


class DuplicateUser(ConflictOrStoreError):
    status_code = 400
    default_message = "User already exists"
