"""Custom exceptions for the Checkout Orchestrator."""


class CheckoutError(Exception):
    """Base exception for checkout-related errors."""

    pass


class ConfigurationError(CheckoutError):
    """
    Raised when the caller supplied an incomplete checkout configuration.

    Configuration errors are not network errors. They surface to the delegate
    as a generic payment failure but are logged separately so they can be told
    apart in telemetry.
    """

    pass


class WalletConfigurationError(ConfigurationError):
    """Raised when wallet-pay is selected without a platform payment request."""

    pass


class TransactionServiceError(CheckoutError):
    """
    Raised by the transaction service transport on network or HTTP errors.

    Submission calls never raise this to the orchestrator. The error is
    carried inside a TransportResult so the raw result can be handed on as-is.
    """

    pass


class TransactionServiceTimeout(TransactionServiceError):
    """Raised when the transaction service does not answer within the timeout."""

    pass


class PaymentResponseDecodeError(CheckoutError):
    """Raised when a payment response body cannot be decoded."""

    pass


class InvalidTransition(RuntimeError):
    """
    Raised when the state machine is asked for a transition it does not allow.

    This indicates a sequencing bug in the caller or the orchestrator itself.
    It is never used for ordinary payment failures.
    """

    def __init__(self, current: str, new: str) -> None:
        super().__init__(f"Invalid transition: {current} -> {new}")
        self.current = current
        self.new = new
