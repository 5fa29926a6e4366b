"""Storefront error taxonomy.

Errors a caller can recover from by fixing its input are ``ValidationError``
subclasses, so Protean's FastAPI integration already renders them as HTTP 400.
The app registers more specific handlers for payment, persistence and
authorization failures (see ``shared.api``).
"""

from protean.exceptions import ValidationError


class AlreadyExists(ValidationError):
    """A (user, product) style membership already exists: favorite, review, cart line."""


class AlreadyInCart(AlreadyExists):
    """The product already has a line in the customer's cart."""


class InvalidQuantity(ValidationError):
    """A cart quantity below 1."""


class InvalidTransition(ValidationError):
    """A state change that does not move strictly forward."""


class PricingError(ValidationError):
    """A stored price is missing or malformed.

    This is a data-integrity problem in the catalogue, so callers surface it
    instead of pricing the product at zero.
    """


class PaymentFailed(ValidationError):
    """The payment collaborator declined the payment or its proof did not verify."""


class PersistenceFailed(ValidationError):
    """A paid order could not be stored and was escalated for reconciliation."""

    def __init__(self, messages, case_id=None, **kwargs):
        super().__init__(messages, **kwargs)
        self.case_id = case_id


class NotAuthenticated(Exception):
    """The request carries no user identity."""


class NotAuthorized(Exception):
    """The caller does not own the resource it tried to change."""
