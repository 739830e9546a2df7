"""
Domain exceptions - business rule violations raised by the application layer
"""


class PostServiceError(Exception):
    """Base class for business errors of the post service"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PostServiceError):
    """Raised when a referenced post or member does not exist"""


class InvalidArgumentError(PostServiceError):
    """Raised when a request parameter is malformed"""


class ForbiddenError(PostServiceError):
    """Raised when a member acts on a post they did not write"""
