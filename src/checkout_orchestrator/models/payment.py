"""Payment request and response models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from checkout_orchestrator.models.exceptions import (
    PaymentResponseDecodeError,
    TransactionServiceError,
)


class PaymentMedium(str, Enum):
    """How payment details are collected from the customer."""

    CARD = "CARD"
    WALLET_PAY = "WALLET_PAY"


class PaymentState(str, Enum):
    """Payment states the orchestrator acts on."""

    AUTHORISED = "AUTHORISED"
    AWAIT_3DS = "AWAIT_3DS"


@dataclass(frozen=True)
class AuthorizationToken:
    """Opaque credential proving the order was authorized."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("authorization token must not be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CardPaymentRequest:
    """Card details collected by the card entry flow."""

    pan: str
    expiry: str
    cvv: str
    cardholder_name: str

    def to_payload(self) -> dict[str, str]:
        return {
            "pan": self.pan,
            "expiry": self.expiry,
            "cvv": self.cvv,
            "cardholderName": self.cardholder_name,
        }


@dataclass(frozen=True)
class WalletPayRequest:
    """
    Platform payment request descriptor for the wallet-pay sheet.

    Supplied by the host application. ``amount_minor`` and ``currency`` may be
    left unset; the payment method strategy fills them in from the order.
    """

    merchant_identifier: str
    country_code: str
    summary_label: str
    supported_networks: tuple[str, ...] = ("visa", "masterCard")
    currency: str | None = None
    amount_minor: int | None = None


@dataclass(frozen=True)
class TransportResult:
    """
    Raw outcome of a submission call.

    Exactly what the transport produced: a body and status code, or an error.
    Nothing here has been interpreted yet.
    """

    data: bytes | None = None
    status_code: int | None = None
    error: TransactionServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


class ThreeDSConfig(BaseModel):
    """Step-up challenge parameters as sent by the gateway."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    acs_url: str | None = Field(default=None, alias="acsUrl")
    acs_pa_req: str | None = Field(default=None, alias="acsPaReq")
    acs_md: str | None = Field(default=None, alias="acsMd")


class PaymentLinks(BaseModel):
    """Links attached to a payment response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    three_ds_term_url: str | None = Field(default=None, alias="threeDSTermURL")


class PaymentResponse(BaseModel):
    """Decoded response to a card payment submission."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    state: str
    three_ds_config: ThreeDSConfig | None = Field(default=None, alias="threeDSConfig")
    payment_links: PaymentLinks | None = Field(default=None, alias="paymentLinks")

    @classmethod
    def decode(cls, data: bytes) -> "PaymentResponse":
        """
        Decode a raw response body.

        Raises:
            PaymentResponseDecodeError: If the body is not a valid payment response
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise PaymentResponseDecodeError(
                f"Invalid payment response: {e.error_count()} error(s)"
            ) from e


@dataclass(frozen=True)
class StepUpConfig:
    """Everything needed to render a step-up (3-D Secure) challenge."""

    acs_url: str
    acs_pa_req: str
    acs_md: str
    completion_url: str

    @classmethod
    def from_response(cls, response: PaymentResponse) -> "StepUpConfig | None":
        """Return a config when every challenge field is present, else None."""
        three_ds = response.three_ds_config
        links = response.payment_links
        if three_ds is None or links is None:
            return None
        if not (three_ds.acs_url and three_ds.acs_pa_req and three_ds.acs_md):
            return None
        if not links.three_ds_term_url:
            return None
        return cls(
            acs_url=three_ds.acs_url,
            acs_pa_req=three_ds.acs_pa_req,
            acs_md=three_ds.acs_md,
            completion_url=links.three_ds_term_url,
        )

    def form_fields(self) -> dict[str, Any]:
        """Fields posted to the ACS page by the challenge renderer."""
        return {
            "PaReq": self.acs_pa_req,
            "MD": self.acs_md,
            "TermUrl": self.completion_url,
        }
