"""Domain models for the Checkout Orchestrator."""

from checkout_orchestrator.models.exceptions import (
    CheckoutError,
    ConfigurationError,
    InvalidTransition,
    PaymentResponseDecodeError,
    TransactionServiceError,
    TransactionServiceTimeout,
    WalletConfigurationError,
)
from checkout_orchestrator.models.order import OrderContext, OrderLinks
from checkout_orchestrator.models.outcome import (
    AuthorizationStatus,
    Outcome,
    PaymentStatus,
    StepUpStatus,
)
from checkout_orchestrator.models.payment import (
    AuthorizationToken,
    CardPaymentRequest,
    PaymentLinks,
    PaymentMedium,
    PaymentResponse,
    PaymentState,
    StepUpConfig,
    ThreeDSConfig,
    TransportResult,
    WalletPayRequest,
)

__all__ = [
    "AuthorizationStatus",
    "AuthorizationToken",
    "CardPaymentRequest",
    "CheckoutError",
    "ConfigurationError",
    "InvalidTransition",
    "OrderContext",
    "OrderLinks",
    "Outcome",
    "PaymentLinks",
    "PaymentMedium",
    "PaymentResponse",
    "PaymentResponseDecodeError",
    "PaymentState",
    "PaymentStatus",
    "StepUpConfig",
    "StepUpStatus",
    "ThreeDSConfig",
    "TransactionServiceError",
    "TransactionServiceTimeout",
    "TransportResult",
    "WalletConfigurationError",
    "WalletPayRequest",
]
