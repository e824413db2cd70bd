"""
Payment method strategy.

Decides which method-collection flow a checkout enters for its configured
payment medium, and adapts the wallet-pay request to the order.
"""

import dataclasses
from dataclasses import dataclass
from typing import Callable

import structlog

from checkout_orchestrator.models import (
    OrderContext,
    PaymentMedium,
    WalletConfigurationError,
    WalletPayRequest,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CardEntryDescriptor:
    """Collect card details through the card entry form."""

    medium: PaymentMedium = PaymentMedium.CARD


@dataclass(frozen=True)
class WalletPayDescriptor:
    """Collect a wallet credential through the device payment sheet."""

    request: WalletPayRequest
    medium: PaymentMedium = PaymentMedium.WALLET_PAY


MethodDescriptor = CardEntryDescriptor | WalletPayDescriptor
DescriptorBuilder = Callable[[OrderContext, WalletPayRequest | None], MethodDescriptor]


def _card_entry(order: OrderContext, wallet_request: WalletPayRequest | None) -> CardEntryDescriptor:
    return CardEntryDescriptor()


def _wallet_pay(order: OrderContext, wallet_request: WalletPayRequest | None) -> WalletPayDescriptor:
    if wallet_request is None:
        logger.error(
            "wallet_pay_configuration_error",
            order_reference=order.reference,
            reason="wallet_pay_request_missing",
        )
        raise WalletConfigurationError(
            "Wallet-pay selected but no platform payment request was supplied"
        )
    return WalletPayDescriptor(request=adapt_wallet_request(order, wallet_request))


def adapt_wallet_request(order: OrderContext, request: WalletPayRequest) -> WalletPayRequest:
    """Fill amount and currency the host left unset from the order."""
    return dataclasses.replace(
        request,
        amount_minor=request.amount_minor if request.amount_minor is not None else order.amount_minor,
        currency=request.currency or order.currency,
    )


class PaymentMethodStrategy:
    """
    Registry-backed selection of method-collection flows.

    Supports new payment media without touching the orchestrator.
    """

    _BUILDERS: dict[PaymentMedium, DescriptorBuilder] = {
        PaymentMedium.CARD: _card_entry,
        PaymentMedium.WALLET_PAY: _wallet_pay,
    }

    @classmethod
    def select(
        cls,
        medium: PaymentMedium,
        order: OrderContext,
        wallet_request: WalletPayRequest | None = None,
    ) -> MethodDescriptor:
        """
        Produce the flow descriptor for a payment medium.

        Args:
            medium: Configured payment medium
            order: Order being paid
            wallet_request: Platform payment request, required for wallet-pay

        Returns:
            CardEntryDescriptor or WalletPayDescriptor

        Raises:
            WalletConfigurationError: Wallet-pay without a platform request
            ValueError: If the medium has no registered builder
        """
        builder = cls._BUILDERS.get(medium)
        if builder is None:
            available = ", ".join(m.value for m in cls._BUILDERS)
            raise ValueError(
                f"Unknown payment medium: {medium}. Available media: {available}"
            )

        descriptor = builder(order, wallet_request)
        logger.info(
            "payment_method_selected",
            medium=medium.value,
            order_reference=order.reference,
        )
        return descriptor
