"""Pytest configuration and shared fixtures for all tests.

This module provides shared test fixtures including:
- Sample orders, tokens and card details
- A recording presentation host and delegate sharing one event log
- A mocked transaction service
"""

import json
from typing import Any
from unittest.mock import AsyncMock

import pytest

from checkout_orchestrator.clients.base import TransactionService
from checkout_orchestrator.flows import Flow, PresentationHost
from checkout_orchestrator.models import (
    AuthorizationToken,
    CardPaymentRequest,
    OrderContext,
    OrderLinks,
    TransportResult,
    WalletPayRequest,
)


class RecordingHost(PresentationHost):
    """Presentation host that records what it was asked to show."""

    def __init__(self, events: list[tuple]) -> None:
        self.events = events
        self.presented: list[Flow] = []
        self.dismiss_count = 0

    async def present(self, flow: Flow) -> None:
        self.presented.append(flow)
        self.events.append(("present", type(flow).__name__))

    async def dismiss(self) -> None:
        self.dismiss_count += 1
        self.events.append(("dismiss",))

    @property
    def current(self) -> Flow:
        return self.presented[-1]


class RecordingDelegate:
    """Delegate implementing every optional notification."""

    def __init__(self, events: list[tuple]) -> None:
        self.events = events

    def authorization_did_begin(self) -> None:
        self.events.append(("authorization_did_begin",))

    def authorization_did_complete(self, status: Any) -> None:
        self.events.append(("authorization_did_complete", status))

    def payment_did_begin(self) -> None:
        self.events.append(("payment_did_begin",))

    def three_ds_challenge_did_begin(self) -> None:
        self.events.append(("three_ds_challenge_did_begin",))

    def three_ds_challenge_did_complete(self, status: Any) -> None:
        self.events.append(("three_ds_challenge_did_complete", status))

    def payment_did_complete(self, status: Any) -> None:
        self.events.append(("payment_did_complete", status))

    def completions(self) -> list[tuple]:
        return [e for e in self.events if e[0] == "payment_did_complete"]


def payment_response_body(state: str, **extra: Any) -> bytes:
    """Encode a gateway payment response."""
    return json.dumps({"state": state, **extra}).encode("utf-8")


def three_ds_body(**overrides: Any) -> bytes:
    """Encode an AWAIT_3DS response with a complete challenge configuration."""
    three_ds_config = {
        "acsUrl": "https://acs.example.com/challenge",
        "acsPaReq": "pareq-blob",
        "acsMd": "md-blob",
    }
    payment_links = {"threeDSTermURL": "https://gateway.example.com/3ds/complete"}
    three_ds_config.update(overrides.pop("three_ds_config", {}))
    payment_links.update(overrides.pop("payment_links", {}))
    body = {
        "state": "AWAIT_3DS",
        "threeDSConfig": {k: v for k, v in three_ds_config.items() if v is not None},
        "paymentLinks": {k: v for k, v in payment_links.items() if v is not None},
    }
    return json.dumps(body).encode("utf-8")


@pytest.fixture
def events():
    """Shared ordered log of host and delegate activity."""
    return []


@pytest.fixture
def host(events):
    return RecordingHost(events)


@pytest.fixture
def delegate(events):
    return RecordingDelegate(events)


@pytest.fixture
def order():
    """Order carrying everything needed for a full checkout."""
    return OrderContext(
        reference="ord-1234",
        authorization_code="auth-code-abc",
        amount_minor=2500,
        currency="AED",
        links=OrderLinks(
            payment_authorization="https://gateway.example.com/payment/authorize",
            card_payment="https://gateway.example.com/orders/ord-1234/payments/p-1/card",
            wallet_pay="https://gateway.example.com/orders/ord-1234/payments/p-1/apple-pay",
            three_ds_completion="https://gateway.example.com/orders/ord-1234/payments/p-1/3ds",
        ),
    )


@pytest.fixture
def token():
    return AuthorizationToken("pt_test_token_123")


@pytest.fixture
def card_request():
    return CardPaymentRequest(
        pan="4111111111111111",
        expiry="2027-12",
        cvv="123",
        cardholder_name="Test User",
    )


@pytest.fixture
def wallet_request():
    return WalletPayRequest(
        merchant_identifier="merchant.com.example.shop",
        country_code="AE",
        summary_label="Example Shop",
    )


@pytest.fixture
def transaction_service(token):
    """Transaction service that authorizes and accepts the payment."""
    service = AsyncMock(spec=TransactionService)
    service.authorize.return_value = token
    service.submit_card_payment.return_value = TransportResult(
        data=payment_response_body("AUTHORISED"),
        status_code=200,
    )
    service.submit_wallet_pay_response.return_value = TransportResult(
        data=b'{"state": "CAPTURED"}',
        status_code=200,
    )
    return service


@pytest.fixture
def response_body():
    """Builder for payment response bodies."""
    return payment_response_body


@pytest.fixture
def step_up_body():
    """Builder for AWAIT_3DS response bodies."""
    return three_ds_body
