"""Terminal outcome reported to the delegate."""

from dataclasses import dataclass
from enum import Enum


class PaymentStatus(str, Enum):
    """Final payment status."""

    PAYMENT_SUCCESS = "PAYMENT_SUCCESS"
    PAYMENT_FAILED = "PAYMENT_FAILED"


class StepUpStatus(str, Enum):
    """Result of a step-up (3-D Secure) challenge."""

    THREE_DS_SUCCESS = "THREE_DS_SUCCESS"
    THREE_DS_FAILED = "THREE_DS_FAILED"


class AuthorizationStatus(str, Enum):
    """Result of acquiring the authorization token."""

    AUTH_SUCCESS = "AUTH_SUCCESS"
    AUTH_FAILED = "AUTH_FAILED"


@dataclass(frozen=True)
class Outcome:
    """The single terminal result of one checkout attempt."""

    payment_status: PaymentStatus
    step_up_status: StepUpStatus | None = None
    authorization_status: AuthorizationStatus | None = None

    @property
    def succeeded(self) -> bool:
        return self.payment_status == PaymentStatus.PAYMENT_SUCCESS
