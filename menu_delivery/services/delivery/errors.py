"""
Delivery error taxonomy.

Each error carries the HTTP status and machine-readable code the API
surfaces; messages are shown to customers and tenant admins as-is.
"""


class DeliveryError(Exception):
    """Base class for delivery fee estimation failures."""

    status_code = 400
    error_code = "delivery_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPostalCodeError(DeliveryError):
    """Malformed CEP supplied by the customer. Raised before any network call."""

    status_code = 400
    error_code = "invalid_postal_code"


class DeliveryConfigurationError(DeliveryError):
    """Tenant settings do not allow pricing; the tenant admin must fix them."""

    status_code = 400
    error_code = "delivery_misconfigured"

    def __init__(self, message: str, setting: str):
        super().__init__(message)
        self.setting = setting


class DeliveryUnavailableError(DeliveryError):
    """Unknown tenant, inactive tenant, or delivery disabled."""

    status_code = 404
    error_code = "delivery_unavailable"


class CoordinatesUnavailableError(DeliveryError):
    """Geocoding failed for the business or the customer CEP."""

    status_code = 422
    error_code = "coordinates_unavailable"

    def __init__(self, message: str, endpoint: str):
        super().__init__(message)
        self.endpoint = endpoint
