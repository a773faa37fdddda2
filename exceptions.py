"""Domain errors raised by repositories and the authentication service.

Each error carries a human readable message. The HTTP layer in ``main`` maps
them to status codes; nothing below the HTTP layer knows about status codes.
"""


class BlogError(Exception):
    """Base class for all blog domain errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BlogError):
    """Raised when an entity id does not exist"""


class DuplicateEmailError(BlogError):
    """Raised when registering an email that is already in use"""


class InvalidCredentialsError(BlogError):
    """Raised when a login attempt fails"""


class InvalidEmailError(InvalidCredentialsError):
    pass


class InvalidPasswordError(InvalidCredentialsError):
    pass


class ValidationFailureError(BlogError):
    """Raised when a required association is missing or an entity is still referenced"""


class InvalidTokenError(BlogError):
    """Raised when a bearer token cannot be decoded or has expired"""
