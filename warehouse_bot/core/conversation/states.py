"""
Pending-input states for multi-step inventory flows.

Each flow variant carries exactly the fields collected so far. The session
store persists a variant as its FSM state plus staging values in the FSM
data and rebuilds it with FlowState.restore().
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Mapping, Optional

from aiogram.fsm.state import State, StatesGroup


class PendingInput(StatesGroup):
    """What free text the chat is expected to supply next."""

    # Single-shot inputs
    awaiting_product_id = State()
    awaiting_thermocup_id = State()
    awaiting_filter = State()
    awaiting_thermocup_create = State()
    awaiting_thermocup_update = State()

    # Stock update: product -> warehouse -> quantity
    awaiting_stock_product_id = State()
    awaiting_stock_warehouse_id = State()
    awaiting_stock_quantity = State()

    # Reserved update: product -> quantity
    awaiting_reserved_product_id = State()
    awaiting_reserved_quantity = State()


def pending_input(raw_state: Optional[str]) -> Optional[State]:
    """Map a raw FSM state string back to its PendingInput state."""
    if raw_state is None:
        return None
    for state in PendingInput:
        if state.state == raw_state:
            return state
    return None


class SessionExpiredError(Exception):
    """Staged values of a multi-step flow are no longer available."""


@dataclass(frozen=True)
class FlowState:
    """Base class for flow variants."""

    # Raw FSM state string of the variant
    tag: ClassVar[str]

    def staged(self) -> dict[str, Any]:
        """Values to keep in staging while this state is pending."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @staticmethod
    def restore(raw_state: str, staging: Mapping[str, Any]) -> "FlowState":
        """
        Rebuild a flow variant from its FSM state and staged values.

        Raises:
            SessionExpiredError: if the state is not a flow state or a field is missing
        """
        cls = FLOW_STATES.get(raw_state)
        if cls is None:
            raise SessionExpiredError(f"{raw_state}: not an inventory flow state")
        values = {}
        for f in fields(cls):
            if staging.get(f.name) is None:
                raise SessionExpiredError(f"{raw_state}: missing staged field {f.name!r}")
            values[f.name] = staging[f.name]
        return cls(**values)


# Single-shot flows

@dataclass(frozen=True)
class AwaitingProductId(FlowState):
    tag = PendingInput.awaiting_product_id.state


@dataclass(frozen=True)
class AwaitingThermocupId(FlowState):
    tag = PendingInput.awaiting_thermocup_id.state


@dataclass(frozen=True)
class AwaitingFilter(FlowState):
    tag = PendingInput.awaiting_filter.state


@dataclass(frozen=True)
class AwaitingThermocupCreate(FlowState):
    tag = PendingInput.awaiting_thermocup_create.state


@dataclass(frozen=True)
class AwaitingThermocupUpdate(FlowState):
    tag = PendingInput.awaiting_thermocup_update.state


# Stock update: product -> warehouse -> quantity

@dataclass(frozen=True)
class AwaitingStockProductId(FlowState):
    tag = PendingInput.awaiting_stock_product_id.state


@dataclass(frozen=True)
class AwaitingStockWarehouseId(FlowState):
    tag = PendingInput.awaiting_stock_warehouse_id.state

    product_id: int


@dataclass(frozen=True)
class AwaitingStockQuantity(FlowState):
    tag = PendingInput.awaiting_stock_quantity.state

    product_id: int
    warehouse_id: int


# Reserved update: product -> quantity

@dataclass(frozen=True)
class AwaitingReservedProductId(FlowState):
    tag = PendingInput.awaiting_reserved_product_id.state


@dataclass(frozen=True)
class AwaitingReservedQuantity(FlowState):
    tag = PendingInput.awaiting_reserved_quantity.state

    product_id: int


# Raw FSM state string -> flow variant
FLOW_STATES: dict[str, type[FlowState]] = {
    cls.tag: cls
    for cls in (
        AwaitingProductId,
        AwaitingThermocupId,
        AwaitingFilter,
        AwaitingThermocupCreate,
        AwaitingThermocupUpdate,
        AwaitingStockProductId,
        AwaitingStockWarehouseId,
        AwaitingStockQuantity,
        AwaitingReservedProductId,
        AwaitingReservedQuantity,
    )
}
