"""Exceptions raised across the menu and notification handlers."""

from typing import Optional


class PizzeriaError(Exception):
    """Base class for every error this package raises on purpose."""


class SourceFetchError(PizzeriaError):
    """A published sheet could not be downloaded."""

    def __init__(self, sheet: str, url: str, reason: str):
        self.sheet = sheet
        self.url = url
        self.reason = reason
        super().__init__(f"Sheet '{sheet}' fetch failed: {reason}")


class SubscriptionInvalid(PizzeriaError):
    """A push subscription descriptor without a delivery endpoint."""


class StoreError(PizzeriaError):
    """The subscription store could not complete an operation."""


class PushDeliveryError(PizzeriaError):
    """The push service refused a message."""

    # 404 Not Found / 410 Gone: the browser dropped the subscription
    PERMANENT_STATUS_CODES = (404, 410)

    def __init__(self, endpoint: str, status_code: Optional[int], reason: str = ""):
        self.endpoint = endpoint
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Push to {endpoint} failed ({status_code}): {reason}")

    @property
    def is_permanent(self) -> bool:
        return self.status_code in self.PERMANENT_STATUS_CODES
