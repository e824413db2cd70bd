"""HTTP transaction service backed by httpx."""

import uuid
from typing import Any

import httpx
import structlog

from checkout_orchestrator.clients.base import TransactionService
from checkout_orchestrator.models import (
    AuthorizationToken,
    CardPaymentRequest,
    OrderContext,
    TransactionServiceError,
    TransactionServiceTimeout,
    TransportResult,
)

logger = structlog.get_logger(__name__)


class HttpTransactionService(TransactionService):
    """
    Transaction service that talks to the payment gateway over HTTP.

    Authorization exchanges the order's one-time code for a ``payment-token``
    cookie. Card and wallet-pay submissions are JSON ``PUT`` requests to the
    links carried by the order, authenticated with that token.

    Submission errors are returned inside a TransportResult rather than
    raised so the orchestrator can decide what they mean for the flow.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout_seconds: float = 30.0,
        payment_media_type: str = "application/vnd.ni-payment.v2+json",
        token_cookie_name: str = "payment-token",
    ):
        """
        Initialize the transaction service.

        Args:
            base_url: Base URL for relative order links (absolute links ignore it)
            timeout_seconds: Request timeout in seconds (default: 30.0)
            payment_media_type: Content-Type/Accept for payment submissions
            token_cookie_name: Cookie the gateway uses for the authorization token
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.payment_media_type = payment_media_type
        self.token_cookie_name = token_cookie_name
        self.http_client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout_seconds)

        logger.info(
            "transaction_service_initialized",
            base_url=self.base_url,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "HttpTransactionService":
        """Build a client from ``Settings.transaction_service``."""
        return cls(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            payment_media_type=settings.payment_media_type,
            token_cookie_name=settings.token_cookie_name,
        )

    async def close(self) -> None:
        """Close the HTTP client connection pool."""
        await self.http_client.aclose()

    async def authorize(
        self,
        authorization_code: str,
        authorization_link: str,
    ) -> AuthorizationToken | None:
        correlation_id = str(uuid.uuid4())

        logger.info(
            "authorization_request",
            url=authorization_link,
            correlation_id=correlation_id,
        )

        try:
            response = await self.http_client.post(
                authorization_link,
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "Accept": "application/vnd.ni-payment.v2+json",
                    "X-Request-ID": correlation_id,
                },
                data={"code": authorization_code},
            )
        except httpx.TimeoutException as e:
            logger.error(
                "authorization_timeout",
                correlation_id=correlation_id,
                error=str(e),
            )
            return None
        except httpx.RequestError as e:
            logger.error(
                "authorization_request_error",
                correlation_id=correlation_id,
                error=str(e),
            )
            return None

        if not 200 <= response.status_code < 300:
            logger.warning(
                "authorization_rejected",
                status_code=response.status_code,
                correlation_id=correlation_id,
            )
            return None

        token_value = response.cookies.get(self.token_cookie_name)
        if not token_value:
            logger.warning(
                "authorization_token_missing",
                cookie_name=self.token_cookie_name,
                correlation_id=correlation_id,
            )
            return None

        logger.info("authorization_success", correlation_id=correlation_id)
        return AuthorizationToken(token_value)

    async def submit_card_payment(
        self,
        order: OrderContext,
        request: CardPaymentRequest,
        token: AuthorizationToken,
    ) -> TransportResult:
        return await self._put_payment(
            operation="card_payment",
            url=order.links.card_payment,
            body=request.to_payload(),
            token=token,
            order_reference=order.reference,
        )

    async def submit_wallet_pay_response(
        self,
        order: OrderContext,
        wallet_payload: dict[str, Any],
        token: AuthorizationToken,
    ) -> TransportResult:
        return await self._put_payment(
            operation="wallet_pay",
            url=order.links.wallet_pay,
            body=wallet_payload,
            token=token,
            order_reference=order.reference,
        )

    async def _put_payment(
        self,
        operation: str,
        url: str | None,
        body: dict[str, Any],
        token: AuthorizationToken,
        order_reference: str,
    ) -> TransportResult:
        if not url:
            logger.error(
                "payment_link_missing",
                operation=operation,
                order_reference=order_reference,
            )
            return TransportResult(
                error=TransactionServiceError(f"Order has no link for {operation}")
            )

        correlation_id = str(uuid.uuid4())
        logger.info(
            "payment_submission_request",
            operation=operation,
            order_reference=order_reference,
            correlation_id=correlation_id,
            url=url,
        )

        try:
            response = await self.http_client.put(
                url,
                headers={
                    "Content-Type": self.payment_media_type,
                    "Accept": self.payment_media_type,
                    "Authorization": f"Bearer {token.value}",
                    "X-Request-ID": correlation_id,
                },
                json=body,
            )
        except httpx.TimeoutException as e:
            logger.error(
                "payment_submission_timeout",
                operation=operation,
                correlation_id=correlation_id,
                error=str(e),
            )
            return TransportResult(
                error=TransactionServiceTimeout(f"Transaction service timeout during {operation}")
            )
        except httpx.RequestError as e:
            logger.error(
                "payment_submission_request_error",
                operation=operation,
                correlation_id=correlation_id,
                error=str(e),
            )
            return TransportResult(
                error=TransactionServiceError(f"Transaction service request error: {e}")
            )

        error = None
        if response.status_code >= 400:
            logger.warning(
                "payment_submission_rejected",
                operation=operation,
                status_code=response.status_code,
                correlation_id=correlation_id,
            )
            error = TransactionServiceError(
                f"Transaction service rejected {operation} (status: {response.status_code})"
            )
        else:
            logger.info(
                "payment_submission_response",
                operation=operation,
                status_code=response.status_code,
                correlation_id=correlation_id,
            )

        return TransportResult(
            data=response.content,
            status_code=response.status_code,
            error=error,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
