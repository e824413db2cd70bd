"""Unit tests for checkout domain models."""

import pytest

from checkout_orchestrator.models import (
    AuthorizationToken,
    CardPaymentRequest,
    OrderContext,
    OrderLinks,
    Outcome,
    PaymentResponse,
    PaymentResponseDecodeError,
    PaymentStatus,
    StepUpConfig,
    TransactionServiceError,
    TransportResult,
)


class TestAuthorizationToken:
    def test_value(self):
        token = AuthorizationToken("pt_abc")

        assert token.value == "pt_abc"
        assert str(token) == "pt_abc"

    def test_empty_token_rejected(self):
        with pytest.raises(ValueError):
            AuthorizationToken("")


class TestOrderContext:
    """Tests for order readiness and gateway parsing."""

    def test_can_authorize(self, order):
        assert order.can_authorize

    @pytest.mark.parametrize(
        "code,link",
        [(None, "https://x/auth"), ("code", None), (None, None)],
    )
    def test_cannot_authorize_without_code_and_link(self, code, link):
        order = OrderContext(
            reference="ord-1",
            authorization_code=code,
            links=OrderLinks(payment_authorization=link),
        )

        assert not order.can_authorize

    def test_from_gateway(self):
        payload = {
            "reference": "ord-77",
            "amount": {"currencyCode": "AED", "value": 1000},
            "_links": {
                "cnp:payment-authorization": {
                    "href": "https://gw.example.com/payment/authorize?code=abc123"
                },
            },
            "_embedded": {
                "payment": [
                    {
                        "_links": {
                            "payment:card": {"href": "https://gw.example.com/p/1/card"},
                            "payment:apple_pay": {"href": "https://gw.example.com/p/1/apple-pay"},
                            "cnp:3ds": {"href": "https://gw.example.com/p/1/3ds"},
                        }
                    }
                ]
            },
        }

        order = OrderContext.from_gateway(payload)

        assert order.reference == "ord-77"
        assert order.authorization_code == "abc123"
        assert order.amount_minor == 1000
        assert order.currency == "AED"
        assert order.links.payment_authorization == "https://gw.example.com/payment/authorize"
        assert order.links.card_payment == "https://gw.example.com/p/1/card"
        assert order.links.wallet_pay == "https://gw.example.com/p/1/apple-pay"
        assert order.links.three_ds_completion == "https://gw.example.com/p/1/3ds"
        assert order.can_authorize

    def test_from_gateway_without_links(self):
        order = OrderContext.from_gateway({"reference": "ord-78"})

        assert order.links == OrderLinks()
        assert order.authorization_code is None
        assert not order.can_authorize

    def test_order_is_immutable(self, order):
        with pytest.raises(AttributeError):
            order.reference = "changed"


class TestPaymentResponse:
    """Tests for decoding gateway payment responses."""

    def test_decode_authorised(self):
        response = PaymentResponse.decode(b'{"state": "AUTHORISED", "amount": {"value": 1}}')

        assert response.state == "AUTHORISED"
        assert response.three_ds_config is None
        assert response.payment_links is None

    def test_decode_three_ds(self, step_up_body):
        response = PaymentResponse.decode(step_up_body())

        assert response.state == "AWAIT_3DS"
        assert response.three_ds_config.acs_url == "https://acs.example.com/challenge"
        assert response.three_ds_config.acs_pa_req == "pareq-blob"
        assert response.three_ds_config.acs_md == "md-blob"
        assert response.payment_links.three_ds_term_url == "https://gateway.example.com/3ds/complete"

    @pytest.mark.parametrize("body", [b"", b"<html>", b'{"amount": 1}', b'"AUTHORISED"'])
    def test_decode_failure(self, body):
        with pytest.raises(PaymentResponseDecodeError):
            PaymentResponse.decode(body)


class TestStepUpConfig:
    def test_from_complete_response(self, step_up_body):
        config = StepUpConfig.from_response(PaymentResponse.decode(step_up_body()))

        assert config == StepUpConfig(
            acs_url="https://acs.example.com/challenge",
            acs_pa_req="pareq-blob",
            acs_md="md-blob",
            completion_url="https://gateway.example.com/3ds/complete",
        )

    def test_pa_req_and_md_kept_apart(self, step_up_body):
        """The challenge request blob is not confused with the merchant data."""
        config = StepUpConfig.from_response(
            PaymentResponse.decode(step_up_body(three_ds_config={"acsPaReq": "P", "acsMd": "M"}))
        )

        assert config.acs_pa_req == "P"
        assert config.acs_md == "M"
        assert config.form_fields() == {
            "PaReq": "P",
            "MD": "M",
            "TermUrl": "https://gateway.example.com/3ds/complete",
        }

    def test_empty_field_counts_as_missing(self, step_up_body):
        response = PaymentResponse.decode(step_up_body(three_ds_config={"acsMd": ""}))

        assert StepUpConfig.from_response(response) is None


class TestCardPaymentRequest:
    def test_payload(self, card_request):
        assert card_request.to_payload() == {
            "pan": "4111111111111111",
            "expiry": "2027-12",
            "cvv": "123",
            "cardholderName": "Test User",
        }

    def test_card_request_is_opaque(self):
        """Card data is passed on without validation."""
        request = CardPaymentRequest(pan="1", expiry="x", cvv="", cardholder_name="")

        assert request.to_payload()["pan"] == "1"


class TestTransportResult:
    def test_ok_with_body(self):
        assert TransportResult(data=b"{}", status_code=200).ok

    def test_not_ok_with_error(self):
        result = TransportResult(data=b"{}", status_code=500, error=TransactionServiceError("x"))

        assert not result.ok

    def test_not_ok_without_body(self):
        assert not TransportResult().ok


class TestOutcome:
    def test_succeeded(self):
        assert Outcome(payment_status=PaymentStatus.PAYMENT_SUCCESS).succeeded
        assert not Outcome(payment_status=PaymentStatus.PAYMENT_FAILED).succeeded

    def test_optional_details_default_to_none(self):
        outcome = Outcome(payment_status=PaymentStatus.PAYMENT_FAILED)

        assert outcome.step_up_status is None
        assert outcome.authorization_status is None
