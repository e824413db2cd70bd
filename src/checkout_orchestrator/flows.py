"""
Flow descriptors handed to the presentation host.

The orchestrator does not render anything. It builds one of these
descriptors for each stage and asks the host to show it. The host reports
back by awaiting the descriptor's callbacks, each at most once.
"""

import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import structlog

from checkout_orchestrator.models import (
    CardPaymentRequest,
    OrderContext,
    PaymentStatus,
    StepUpConfig,
    TransportResult,
    WalletPayRequest,
)

logger = structlog.get_logger(__name__)

WalletPaySink = Callable[[TransportResult], Awaitable[None]]


@dataclass(frozen=True)
class AuthorizingFlow:
    """Placeholder shown while the authorization token is requested."""

    order_reference: str


@dataclass(frozen=True)
class CardEntryFlow:
    """Card entry form. ``on_payment_request`` is awaited once with the card details."""

    order_reference: str
    on_payment_request: Callable[[CardPaymentRequest], Awaitable[None]]


@dataclass(frozen=True)
class WalletPayFlow:
    """
    Device wallet payment sheet.

    ``on_authorize`` is awaited once with the wallet payload and a sink that
    receives the raw submission result. ``on_finish`` is awaited once when the
    sheet closes, with the status the sheet derived from that result.
    """

    order: OrderContext
    request: WalletPayRequest
    on_authorize: Callable[[dict[str, Any], WalletPaySink], Awaitable[None]]
    on_finish: Callable[[PaymentStatus], Awaitable[None]]


@dataclass(frozen=True)
class StepUpChallengeFlow:
    """3-D Secure challenge page. ``on_complete`` is awaited once with success."""

    config: StepUpConfig
    on_complete: Callable[[bool], Awaitable[None]]


Flow = AuthorizingFlow | CardEntryFlow | WalletPayFlow | StepUpChallengeFlow


class PresentationHost(ABC):
    """
    Host-side surface that owns visual state.

    Implemented by the application embedding the orchestrator. ``present``
    replaces whatever was shown before.
    """

    @abstractmethod
    async def present(self, flow: Flow) -> None:
        pass

    @abstractmethod
    async def dismiss(self) -> None:
        pass


def weak_callback(method: Callable[..., Awaitable[None]]) -> Callable[..., Awaitable[None]]:
    """
    Wrap a bound coroutine method without keeping its instance alive.

    Flows may outlive the orchestrator that created them. Calling the
    returned function after the instance was collected does nothing.
    """
    ref = weakref.WeakMethod(method)
    name = method.__name__

    async def invoke(*args: Any) -> None:
        target = ref()
        if target is None:
            logger.info("callback_dropped_instance_gone", callback=name)
            return
        await target(*args)

    invoke.__name__ = name
    return invoke
