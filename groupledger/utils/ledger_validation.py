"""Ledger event validation utilities."""
import logging
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from groupledger.models.ledger import ExpenseEvent, SettlementEvent

logger = logging.getLogger(__name__)


class InvalidLedgerEvent(Exception):
    """An expense or settlement that cannot be folded into a ledger."""

    def __init__(self, message: str, event_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.event_id = event_id

    def to_detail(self) -> dict:
        return {"message": self.message, "event_id": self.event_id}


class UnknownParticipant(InvalidLedgerEvent):
    """Event references an identity outside the group's member set."""

    def __init__(self, user_id: str, event_id: Optional[str] = None):
        super().__init__(f"User '{user_id}' is not a member of the group", event_id)
        self.user_id = user_id


def validate_expense_event(
    event: ExpenseEvent,
    group_id: str,
    members: Optional[Set[str]] = None
) -> None:
    """
    Validate one expense event.

    Rules:
    - event belongs to group_id
    - total_cents must be positive
    - every share is non-negative and each participant appears once
    - shares sum to total_cents exactly
    """
    if event.group_id != group_id:
        raise InvalidLedgerEvent(
            f"Expense belongs to group '{event.group_id}', not '{group_id}'",
            event.event_id
        )

    if event.total_cents <= 0:
        raise InvalidLedgerEvent(
            f"Expense total must be positive: {event.total_cents}",
            event.event_id
        )

    seen: Set[str] = set()
    for share in event.shares:
        if share.amount_cents < 0:
            raise InvalidLedgerEvent(
                f"Share for '{share.user_id}' is negative: {share.amount_cents}",
                event.event_id
            )
        if share.user_id in seen:
            raise InvalidLedgerEvent(
                f"Participant '{share.user_id}' appears more than once",
                event.event_id
            )
        seen.add(share.user_id)

    share_sum = sum(share.amount_cents for share in event.shares)
    if share_sum != event.total_cents:
        raise InvalidLedgerEvent(
            f"Share sum ({share_sum}) does not equal total ({event.total_cents})",
            event.event_id
        )

    if members is not None:
        for user_id in [event.payer_id, *seen]:
            if user_id not in members:
                raise UnknownParticipant(user_id, event.event_id)


def validate_settlement_event(
    event: SettlementEvent,
    group_id: str,
    members: Optional[Set[str]] = None
) -> None:
    """
    Validate one settlement event.

    Rules:
    - event belongs to group_id
    - amount_cents must be positive
    - payer and receiver must differ
    """
    if event.group_id != group_id:
        raise InvalidLedgerEvent(
            f"Settlement belongs to group '{event.group_id}', not '{group_id}'",
            event.event_id
        )

    if event.amount_cents <= 0:
        raise InvalidLedgerEvent(
            f"Settlement amount must be positive: {event.amount_cents}",
            event.event_id
        )

    if event.payer_id == event.receiver_id:
        raise InvalidLedgerEvent("Cannot settle with yourself", event.event_id)

    if members is not None:
        for user_id in (event.payer_id, event.receiver_id):
            if user_id not in members:
                raise UnknownParticipant(user_id, event.event_id)


def validate_events(
    group_id: str,
    expense_events: Iterable[ExpenseEvent],
    settlement_events: Iterable[SettlementEvent],
    members: Optional[Iterable[str]] = None
) -> None:
    """Validate a whole history; the first bad event rejects all of it."""
    member_set = set(members) if members is not None else None
    try:
        for expense in expense_events:
            validate_expense_event(expense, group_id, member_set)
        for settlement in settlement_events:
            validate_settlement_event(settlement, group_id, member_set)
    except InvalidLedgerEvent as exc:
        logger.warning(
            "Rejected ledger for group %s: %s (event %s)",
            group_id, exc.message, exc.event_id
        )
        raise


def split_equally(amount_cents: int, user_ids: Sequence[str]) -> List[Tuple[str, int]]:
    """
    Divide amount_cents across user_ids so the parts sum exactly.

    Leftover cents go one each to the earliest users in the given order.
    """
    if not user_ids:
        raise InvalidLedgerEvent("At least one participant required")
    if len(set(user_ids)) != len(user_ids):
        raise InvalidLedgerEvent("Participants must be unique")

    base, remainder = divmod(amount_cents, len(user_ids))
    return [
        (user_id, base + (1 if index < remainder else 0))
        for index, user_id in enumerate(user_ids)
    ]
