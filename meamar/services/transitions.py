"""Status transition guards.

Every status change goes through ``StateMachine.check`` before it is
persisted. Re-asserting the current status is a no-op and always allowed;
anything else must be listed in the machine's table.
"""

from typing import Dict, FrozenSet, Generic, Hashable, Mapping, Optional, TypeVar
from meamar.models.order import OrderStatus
from meamar.models.organization import OrganizationStatus
from meamar.models.rfq import RfqStatus

S = TypeVar("S", bound=Hashable)

class InvalidTransition(ValueError):
    def __init__(self, entity: str, current, target):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change {entity} status from {_label(current)} to {_label(target)}"
        )

def _label(state) -> str:
    if state is None:
        return "undecided"
    return str(getattr(state, "value", state))

class StateMachine(Generic[S]):
    def __init__(self, entity: str, allowed: Mapping[S, FrozenSet[S]]):
        self.entity = entity
        self.allowed: Dict[S, FrozenSet[S]] = dict(allowed)

    def can(self, current: S, target: S) -> bool:
        return current == target or target in self.allowed.get(current, frozenset())

    def check(self, current: S, target: S) -> S:
        """Return target if current -> target is allowed, else raise InvalidTransition"""
        if not self.can(current, target):
            raise InvalidTransition(self.entity, current, target)
        return target

ORGANIZATION = StateMachine(
    "organization",
    {
        OrganizationStatus.PENDING: frozenset({OrganizationStatus.ACTIVE, OrganizationStatus.REJECTED}),
        OrganizationStatus.ACTIVE: frozenset({OrganizationStatus.SUSPENDED}),
        OrganizationStatus.SUSPENDED: frozenset({OrganizationStatus.ACTIVE}),
    },
)

RFQ = StateMachine(
    "RFQ",
    {
        RfqStatus.DRAFT: frozenset({RfqStatus.PUBLISHED, RfqStatus.CANCELLED}),
        RfqStatus.PUBLISHED: frozenset({RfqStatus.CLOSED, RfqStatus.CANCELLED}),
    },
)

# is_accepted: None (pending) -> True (accepted) | False (rejected)
QUOTE_DECISION: StateMachine[Optional[bool]] = StateMachine(
    "quote",
    {None: frozenset({True, False})},
)

ORDER = StateMachine(
    "order",
    {
        OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
        OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
        OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    },
)
