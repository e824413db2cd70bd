"""Flow states and the transitions allowed between them."""

from dataclasses import dataclass

from checkout_orchestrator.flows import CardEntryFlow, WalletPayFlow
from checkout_orchestrator.models import AuthorizationToken, InvalidTransition, Outcome


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Authorizing:
    pass


@dataclass(frozen=True)
class CollectingMethod:
    """Waiting for the method-collection flow. The token only exists from here on."""

    token: AuthorizationToken
    flow: CardEntryFlow | WalletPayFlow | None = None


@dataclass(frozen=True)
class Submitting:
    token: AuthorizationToken


@dataclass(frozen=True)
class AwaitingStepUp:
    token: AuthorizationToken


@dataclass(frozen=True)
class Completed:
    outcome: Outcome


FlowState = Idle | Authorizing | CollectingMethod | Submitting | AwaitingStepUp | Completed

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "Idle": {"Authorizing", "Completed"},
    "Authorizing": {"CollectingMethod", "Completed"},
    "CollectingMethod": {"CollectingMethod", "Submitting", "Completed"},
    "Submitting": {"AwaitingStepUp", "Completed"},
    "AwaitingStepUp": {"Completed"},
    "Completed": set(),
}


def state_name(state: FlowState) -> str:
    return type(state).__name__


def validate_transition(current: FlowState, new: FlowState) -> None:
    """Raise when a transition is not allowed by the state machine."""

    current_name, new_name = state_name(current), state_name(new)
    if new_name not in ALLOWED_TRANSITIONS.get(current_name, set()):
        raise InvalidTransition(current_name, new_name)
