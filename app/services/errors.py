# =============================================
# File: app/services/errors.py
# Purpose: Domain errors raised by services and translated to HTTP by routers
# =============================================


class StoreError(Exception):
    """Base class for storefront service errors."""


class NotFoundError(StoreError):
    pass


class CartValidationError(StoreError):
    pass


class CheckoutError(StoreError):
    pass


class ProductConflictError(StoreError):
    pass


class RecommendationError(StoreError):
    pass


class TryOnError(StoreError):
    pass
