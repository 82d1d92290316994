from typing import Optional


class ContentError(Exception):
    """Base for every failure the admin endpoints turn into a JSON error response."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthError(ContentError):
    status_code = 403


class PayloadError(ContentError):
    status_code = 400


class ContentValidationError(ContentError):
    """A menu item failed normalization. The whole save is aborted."""

    status_code = 400

    def __init__(self, message: str, section: str = "", item: str = ""):
        super().__init__(message)
        self.section = section
        self.item = item


class InvalidPriceError(ContentValidationError):
    pass


class InvalidQuantityError(ContentValidationError):
    pass


class QuantityBelowMinimumError(ContentValidationError):
    pass


class PersistenceError(ContentError):
    status_code = 500
