"""
Checkout orchestration state machine.

Drives one checkout attempt through its stages:
1. Request an authorization token for the order
2. Collect a payment method (card entry form or wallet-pay sheet)
3. Submit the card payment
4. Run a 3-D Secure challenge when the gateway asks for one
5. Report the outcome to the delegate, exactly once

Each inbound asynchronous event has its own handler. A handler only acts
when the current state accepts its event; otherwise the event is logged and
dropped. Every terminal path goes through ``_complete``.
"""

import uuid
from typing import Any, Awaitable, Callable

import structlog

from checkout_orchestrator.clients.base import TransactionService
from checkout_orchestrator.delegate import DelegateNotifier, Dispatch
from checkout_orchestrator.flows import (
    AuthorizingFlow,
    CardEntryFlow,
    Flow,
    PresentationHost,
    StepUpChallengeFlow,
    WalletPayFlow,
    WalletPaySink,
    weak_callback,
)
from checkout_orchestrator.models import (
    AuthorizationStatus,
    AuthorizationToken,
    CardPaymentRequest,
    InvalidTransition,
    OrderContext,
    Outcome,
    PaymentMedium,
    PaymentResponse,
    PaymentResponseDecodeError,
    PaymentState,
    PaymentStatus,
    StepUpConfig,
    StepUpStatus,
    TransactionServiceError,
    TransportResult,
    WalletConfigurationError,
    WalletPayRequest,
)
from checkout_orchestrator.state import (
    Authorizing,
    AwaitingStepUp,
    CollectingMethod,
    Completed,
    FlowState,
    Idle,
    Submitting,
    state_name,
    validate_transition,
)
from checkout_orchestrator.strategy import PaymentMethodStrategy, WalletPayDescriptor

logger = structlog.get_logger(__name__)


class CheckoutOrchestrator:
    """
    Owns the flow state of a single checkout attempt.

    Not safe for concurrent use: all handlers must run on one event loop, and
    by construction only one network call is outstanding at a time. Flows
    receive weak callbacks, so a discarded orchestrator ignores late events.
    """

    def __init__(
        self,
        order: OrderContext,
        transaction_service: TransactionService,
        host: PresentationHost,
        delegate: Any,
        payment_medium: PaymentMedium = PaymentMedium.CARD,
        wallet_request: WalletPayRequest | None = None,
        dispatch: Dispatch | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            order: Order being paid (read-only)
            transaction_service: Network operations for authorization and submission
            host: Presentation host that shows and dismisses flows
            delegate: Observer implementing at least payment_did_complete(status)
            payment_medium: How payment details are collected
            wallet_request: Platform payment request, required for wallet-pay
            dispatch: Hook that runs delegate calls on the UI context

        Raises:
            TypeError: If the delegate lacks payment_did_complete
        """
        self.order = order
        self.payment_medium = payment_medium
        self.wallet_request = wallet_request
        self.checkout_id = str(uuid.uuid4())
        self._transaction_service = transaction_service
        self._host = host
        self._notifier = DelegateNotifier(delegate, dispatch)
        self._state: FlowState = Idle()
        self._log = logger.bind(
            checkout_id=self.checkout_id,
            order_reference=order.reference,
        )

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def outcome(self) -> Outcome | None:
        if isinstance(self._state, Completed):
            return self._state.outcome
        return None

    @property
    def is_completed(self) -> bool:
        return isinstance(self._state, Completed)

    async def start(self) -> None:
        """
        Begin the checkout by requesting an authorization token.

        Raises:
            InvalidTransition: If the orchestrator was already started
        """
        if not isinstance(self._state, Idle):
            raise InvalidTransition(state_name(self._state), "Authorizing")

        if not self.order.can_authorize:
            self._log.warning(
                "authorization_data_missing",
                has_authorization_code=bool(self.order.authorization_code),
                has_authorization_link=bool(self.order.links.payment_authorization),
            )
            await self._complete(
                PaymentStatus.PAYMENT_FAILED,
                auth_status=AuthorizationStatus.AUTH_FAILED,
            )
            return

        self._notifier.authorization_did_begin()
        self._transition(Authorizing())
        await self._present(AuthorizingFlow(order_reference=self.order.reference))

        self._log.info("authorization_started", medium=self.payment_medium.value)
        try:
            token = await self._transaction_service.authorize(
                self.order.authorization_code,
                self.order.links.payment_authorization,
            )
        except Exception as e:
            self._log.error("authorization_unexpected_error", error=str(e), exc_info=True)
            token = None

        await self.on_authorization_result(token)

    async def on_authorization_result(self, token: AuthorizationToken | None) -> None:
        """Handle the result of the authorization call."""
        if not isinstance(self._state, Authorizing):
            self._ignore("authorization_result")
            return

        if token is None:
            self._log.warning("authorization_failed")
            await self._complete(
                PaymentStatus.PAYMENT_FAILED,
                auth_status=AuthorizationStatus.AUTH_FAILED,
            )
            return

        self._transition(CollectingMethod(token=token))
        self._log.info("authorization_succeeded")
        self._notifier.authorization_did_complete(AuthorizationStatus.AUTH_SUCCESS)
        self._notifier.payment_did_begin()
        await self.begin_method_collection()

    async def begin_method_collection(self) -> None:
        """Build and present the method-collection flow for the configured medium."""
        state = self._state
        if not isinstance(state, CollectingMethod) or state.flow is not None:
            self._ignore("begin_method_collection")
            return

        try:
            descriptor = PaymentMethodStrategy.select(
                self.payment_medium,
                self.order,
                self.wallet_request,
            )
        except WalletConfigurationError as e:
            self._log.error(
                "method_collection_configuration_error",
                medium=self.payment_medium.value,
                error=str(e),
            )
            await self._complete(PaymentStatus.PAYMENT_FAILED)
            return

        flow: CardEntryFlow | WalletPayFlow
        if isinstance(descriptor, WalletPayDescriptor):
            flow = WalletPayFlow(
                order=self.order,
                request=descriptor.request,
                on_authorize=weak_callback(self.on_wallet_pay_authorization),
                on_finish=weak_callback(self.on_wallet_pay_finished),
            )
        else:
            flow = CardEntryFlow(
                order_reference=self.order.reference,
                on_payment_request=weak_callback(self.submit_payment),
            )

        self._transition(CollectingMethod(token=state.token, flow=flow))
        if not await self._present(flow):
            await self._complete(PaymentStatus.PAYMENT_FAILED)

    async def submit_payment(self, request: CardPaymentRequest) -> None:
        """Submit card details collected by the card entry flow."""
        state = self._state
        if not isinstance(state, CollectingMethod) or not isinstance(state.flow, CardEntryFlow):
            self._ignore("payment_request")
            return

        self._transition(Submitting(token=state.token))
        self._log.info("payment_submitted")
        result = await self._call_transaction_service(
            "card_payment",
            self._transaction_service.submit_card_payment,
            self.order,
            request,
            state.token,
        )
        await self._on_payment_result(result)

    async def on_step_up_result(self, success: bool) -> None:
        """Handle the outcome of the 3-D Secure challenge."""
        if not isinstance(self._state, AwaitingStepUp):
            self._ignore("step_up_result")
            return

        if success:
            await self._complete(
                PaymentStatus.PAYMENT_SUCCESS,
                step_up_status=StepUpStatus.THREE_DS_SUCCESS,
            )
        else:
            await self._complete(
                PaymentStatus.PAYMENT_FAILED,
                step_up_status=StepUpStatus.THREE_DS_FAILED,
            )

    async def on_wallet_pay_authorization(
        self,
        payment_payload: dict[str, Any],
        completion_sink: WalletPaySink,
    ) -> None:
        """
        Forward the wallet credential to the transaction service.

        The raw result goes to ``completion_sink`` untouched; the wallet
        sheet decides what it means and reports back via on_wallet_pay_finished.
        """
        state = self._state
        if not isinstance(state, CollectingMethod) or not isinstance(state.flow, WalletPayFlow):
            self._ignore("wallet_pay_authorization")
            return

        self._log.info("wallet_pay_submitted")
        result = await self._call_transaction_service(
            "wallet_pay",
            self._transaction_service.submit_wallet_pay_response,
            self.order,
            payment_payload,
            state.token,
        )
        await completion_sink(result)

    async def on_wallet_pay_finished(self, status: PaymentStatus) -> None:
        """Handle the wallet sheet closing with the status it derived."""
        state = self._state
        if not isinstance(state, CollectingMethod) or not isinstance(state.flow, WalletPayFlow):
            self._ignore("wallet_pay_finished")
            return

        await self._complete(PaymentStatus(status))

    async def _on_payment_result(self, result: TransportResult) -> None:
        state = self._state
        if not isinstance(state, Submitting):
            self._ignore("payment_result")
            return

        if not result.ok:
            self._log.error(
                "payment_submission_failed",
                status_code=result.status_code,
                error=str(result.error) if result.error else "empty response body",
            )
            await self._complete(PaymentStatus.PAYMENT_FAILED)
            return

        try:
            response = PaymentResponse.decode(result.data)
        except PaymentResponseDecodeError as e:
            self._log.error("payment_response_decode_failed", error=str(e))
            await self._complete(PaymentStatus.PAYMENT_FAILED)
            return

        self._log.info("payment_response_received", payment_state=response.state)
        if response.state == PaymentState.AUTHORISED:
            await self._complete(PaymentStatus.PAYMENT_SUCCESS)
        elif response.state == PaymentState.AWAIT_3DS:
            await self._begin_step_up(response, state.token)
        else:
            await self._complete(PaymentStatus.PAYMENT_FAILED)

    async def _begin_step_up(self, response: PaymentResponse, token: AuthorizationToken) -> None:
        self._notifier.three_ds_challenge_did_begin()

        config = StepUpConfig.from_response(response)
        if config is None:
            self._log.warning(
                "step_up_config_incomplete",
                has_three_ds_config=response.three_ds_config is not None,
                has_payment_links=response.payment_links is not None,
            )
            await self._complete(
                PaymentStatus.PAYMENT_FAILED,
                step_up_status=StepUpStatus.THREE_DS_FAILED,
            )
            return

        flow = StepUpChallengeFlow(
            config=config,
            on_complete=weak_callback(self.on_step_up_result),
        )
        self._transition(AwaitingStepUp(token=token))
        self._log.info("step_up_started", acs_url=config.acs_url)
        if not await self._present(flow):
            await self._complete(
                PaymentStatus.PAYMENT_FAILED,
                step_up_status=StepUpStatus.THREE_DS_FAILED,
            )

    async def _complete(
        self,
        payment_status: PaymentStatus,
        step_up_status: StepUpStatus | None = None,
        auth_status: AuthorizationStatus | None = None,
    ) -> None:
        """
        Single exit for every terminal path.

        Notifies step-up completion, then authorization completion, dismisses
        the presented flow and finally reports the payment status. Later
        calls are no-ops.
        """
        if isinstance(self._state, Completed):
            self._log.info(
                "completion_ignored",
                payment_status=payment_status.value,
                outcome=self._state.outcome.payment_status.value,
            )
            return

        outcome = Outcome(
            payment_status=payment_status,
            step_up_status=step_up_status,
            authorization_status=auth_status,
        )
        previous = state_name(self._state)
        self._transition(Completed(outcome=outcome))
        self._log.info(
            "flow_completed",
            from_state=previous,
            payment_status=payment_status.value,
            step_up_status=step_up_status.value if step_up_status else None,
            authorization_status=auth_status.value if auth_status else None,
        )

        if step_up_status is not None:
            self._notifier.three_ds_challenge_did_complete(step_up_status)
        if auth_status is not None:
            self._notifier.authorization_did_complete(auth_status)

        try:
            await self._host.dismiss()
        except Exception as e:
            self._log.error("dismiss_failed", error=str(e), exc_info=True)

        self._notifier.payment_did_complete(payment_status)

    async def _present(self, flow: Flow) -> bool:
        try:
            await self._host.present(flow)
        except Exception as e:
            self._log.error(
                "presentation_failed",
                flow=type(flow).__name__,
                error=str(e),
                exc_info=True,
            )
            return False
        return True

    async def _call_transaction_service(
        self,
        operation: str,
        submit: Callable[..., Awaitable[TransportResult]],
        *args: Any,
    ) -> TransportResult:
        try:
            return await submit(*args)
        except Exception as e:
            self._log.error(
                "transaction_service_unexpected_error",
                operation=operation,
                error=str(e),
                exc_info=True,
            )
            return TransportResult(error=TransactionServiceError(str(e)))

    def _transition(self, new_state: FlowState) -> None:
        validate_transition(self._state, new_state)
        self._log.debug(
            "state_transition",
            from_state=state_name(self._state),
            to_state=state_name(new_state),
        )
        self._state = new_state

    def _ignore(self, inbound: str) -> None:
        self._log.info(
            "event_ignored",
            inbound_event=inbound,
            state=state_name(self._state),
        )
