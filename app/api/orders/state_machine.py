"""
Order status transition policy
"""

from typing import Dict, List, Set
from app.models.order import OrderStatus

STRICT_TRANSITIONS: Dict[OrderStatus, Set[OrderStatus]] = {
    OrderStatus.PLACED: {
        OrderStatus.IN_PROGRESS,
        OrderStatus.CANCELED
    },
    OrderStatus.IN_PROGRESS: {
        OrderStatus.DELIVERED,
        OrderStatus.CANCELED
    },
    OrderStatus.DELIVERED: {
        OrderStatus.COMPLETED,
        OrderStatus.CANCELED
    },
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELED: set(),
}

class OrderStateMachine:
    """
    Decides whether an admin may move an order between statuses

    In "free" mode every status is reachable from every other one, which
    is what the back-office offers today. "strict" follows the happy path
    placed -> in_progress -> delivered -> completed with a side exit to
    canceled.
    """

    def __init__(self, policy: str = "free"):
        if policy not in ("free", "strict"):
            raise ValueError(f"Unknown order status policy: {policy}")
        self.policy = policy
        self.transitions = STRICT_TRANSITIONS

    def can_transition(
        self,
        current_status: OrderStatus,
        new_status: OrderStatus
    ) -> bool:
        """
        Check if transition is valid

        Args:
            current_status: Current order status
            new_status: Desired new status

        Returns:
            True if transition is allowed
        """
        if current_status == new_status or self.policy == "free":
            return True
        return new_status in self.transitions.get(current_status, set())

    def get_valid_transitions(
        self,
        current_status: OrderStatus
    ) -> List[OrderStatus]:
        """Statuses reachable from current_status"""
        if self.policy == "free":
            return [s for s in OrderStatus if s != current_status]
        return sorted(self.transitions.get(current_status, set()), key=lambda s: list(OrderStatus).index(s))
