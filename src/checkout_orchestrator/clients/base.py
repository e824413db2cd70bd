"""Base interface for transaction services."""

from abc import ABC, abstractmethod
from typing import Any

from checkout_orchestrator.models import (
    AuthorizationToken,
    CardPaymentRequest,
    OrderContext,
    TransportResult,
)


class TransactionService(ABC):
    """
    Network operations the orchestrator depends on.

    Implementations own transport concerns (timeouts, connection pooling,
    wire encoding). The orchestrator never retries and never looks inside a
    TransportResult it hands on to a wallet sheet.
    """

    @abstractmethod
    async def authorize(
        self,
        authorization_code: str,
        authorization_link: str,
    ) -> AuthorizationToken | None:
        """
        Exchange the order's authorization code for an authorization token.

        Returns:
            The token, or None when authorization failed for any reason.
        """
        pass

    @abstractmethod
    async def submit_card_payment(
        self,
        order: OrderContext,
        request: CardPaymentRequest,
        token: AuthorizationToken,
    ) -> TransportResult:
        """
        Submit card details collected from the customer.

        Returns:
            The raw response body, or the transport error, as a TransportResult.
            Transport failures are returned, not raised.
        """
        pass

    @abstractmethod
    async def submit_wallet_pay_response(
        self,
        order: OrderContext,
        wallet_payload: dict[str, Any],
        token: AuthorizationToken,
    ) -> TransportResult:
        """Submit the payment credential produced by the wallet-pay sheet."""
        pass
