"""Lifecycle notifications delivered to the host's delegate object."""

from typing import Any, Callable, Protocol

import structlog

from checkout_orchestrator.models import AuthorizationStatus, PaymentStatus, StepUpStatus

logger = structlog.get_logger(__name__)

Dispatch = Callable[[Callable[[], None]], Any]


class CheckoutDelegate(Protocol):
    """
    Observer for one checkout attempt.

    Only ``payment_did_complete`` is required. Every other method is an
    optional slot: leave it out and the notification is skipped.
    """

    def authorization_did_begin(self) -> None: ...

    def authorization_did_complete(self, status: AuthorizationStatus) -> None: ...

    def payment_did_begin(self) -> None: ...

    def three_ds_challenge_did_begin(self) -> None: ...

    def three_ds_challenge_did_complete(self, status: StepUpStatus) -> None: ...

    def payment_did_complete(self, status: PaymentStatus) -> None: ...


def _call_inline(fn: Callable[[], None]) -> None:
    fn()


class DelegateNotifier:
    """
    Fire delegate callbacks through a dispatch hook.

    ``dispatch`` marshals each call onto the context that owns visual state,
    e.g. ``loop.call_soon_threadsafe``. By default calls run inline.
    """

    def __init__(self, delegate: Any, dispatch: Dispatch | None = None) -> None:
        if not callable(getattr(delegate, "payment_did_complete", None)):
            raise TypeError(
                f"{type(delegate).__name__} must implement payment_did_complete(status)"
            )
        self._delegate = delegate
        self._dispatch = dispatch or _call_inline

    def authorization_did_begin(self) -> None:
        self._notify("authorization_did_begin")

    def authorization_did_complete(self, status: AuthorizationStatus) -> None:
        self._notify("authorization_did_complete", status)

    def payment_did_begin(self) -> None:
        self._notify("payment_did_begin")

    def three_ds_challenge_did_begin(self) -> None:
        self._notify("three_ds_challenge_did_begin")

    def three_ds_challenge_did_complete(self, status: StepUpStatus) -> None:
        self._notify("three_ds_challenge_did_complete", status)

    def payment_did_complete(self, status: PaymentStatus) -> None:
        self._notify("payment_did_complete", status)

    def _notify(self, name: str, *args: Any) -> None:
        method = getattr(self._delegate, name, None)
        if not callable(method):
            return

        def call() -> None:
            try:
                method(*args)
            except Exception as e:
                # A faulty observer must not stop the remaining notifications
                logger.error(
                    "delegate_callback_failed",
                    callback=name,
                    error=str(e),
                    exc_info=True,
                )

        self._dispatch(call)
