# kushalwear/domain/errors.py
"""
Bledy domenowe. Kazdy niesie status HTTP, handlery w api/errors.py
tlumacza je na odpowiedz {"message": ...}.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, errors: list | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError, ValueError):
    status_code = 400
    default_message = "Validation failed"


class AuthError(AppError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AppError, PermissionError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ItemNotFound(NotFoundError):
    default_message = "Item not found in cart"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class StaleCartError(ConflictError):
    default_message = "Cart was modified by another request, please retry"


class StaleWishlistError(ConflictError):
    default_message = "Wishlist was modified by another request, please retry"


class InternalError(AppError):
    status_code = 500
