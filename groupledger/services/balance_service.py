"""
Balance computation for groups.

Core algorithm:
1. Fold expenses and settlements into one signed amount per unordered pair
2. Derive per-user net positions from the pairwise amounts
3. Greedily match the largest debtor with the largest creditor to build a
   settle-up plan
4. Summarize a single user's owed/owing/net figures

The module-level functions are pure: they take whole event histories or
balance snapshots and return new values, holding no state between calls.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from groupledger.db.session import get_database
from groupledger.models.group import Group
from groupledger.models.ledger import (
    ExpenseEvent,
    NetBalance,
    PairwiseBalance,
    SettlementEvent,
    SettlementInstruction,
)
from groupledger.repositories.expense_repo import ExpenseRepository
from groupledger.repositories.group_repo import GroupRepository
from groupledger.repositories.settlement_repo import SettlementRepository
from groupledger.schemas.balance import (
    BalanceLine,
    FriendBalance,
    FriendGroupBalance,
    GroupBalancesResponse,
    NetBalanceResponse,
)
from groupledger.utils.ledger_validation import InvalidLedgerEvent, validate_events

logger = logging.getLogger(__name__)

PairKey = Tuple[str, str]


def pair_key(user_x: str, user_y: str) -> PairKey:
    """Canonical key for an unordered pair of users."""
    return (user_x, user_y) if user_x < user_y else (user_y, user_x)


def _record_debt(ledger: Dict[PairKey, int], debtor: str, creditor: str, amount_cents: int) -> None:
    if debtor == creditor:
        return
    key = pair_key(debtor, creditor)
    # Positive means the higher identity owes the lower one.
    signed = amount_cents if creditor == key[0] else -amount_cents
    ledger[key] = ledger.get(key, 0) + signed


def aggregate(
    group_id: str,
    expense_events: Iterable[ExpenseEvent],
    settlement_events: Iterable[SettlementEvent],
    members: Optional[Iterable[str]] = None
) -> List[PairwiseBalance]:
    """
    Fold a group's event history into pairwise balances.

    Every participant share owes the payer; a settlement from P to R counts
    as R owing P, which cancels debt running from P to R. Pairs that net to
    zero are dropped. Raises InvalidLedgerEvent (or UnknownParticipant when
    members is given) if any event is malformed; nothing partial is returned.
    """
    expenses = list(expense_events)
    settlements = list(settlement_events)
    validate_events(group_id, expenses, settlements, members)

    ledger: Dict[PairKey, int] = {}

    for expense in expenses:
        for share in expense.shares:
            if share.amount_cents:
                _record_debt(ledger, share.user_id, expense.payer_id, share.amount_cents)

    for settlement in settlements:
        _record_debt(ledger, settlement.receiver_id, settlement.payer_id, settlement.amount_cents)

    balances = [
        PairwiseBalance(user_a=key[0], user_b=key[1], amount_cents=amount)
        for key, amount in sorted(ledger.items())
        if amount != 0
    ]
    logger.debug(
        "Aggregated group %s: %d expenses, %d settlements -> %d open pairs",
        group_id, len(expenses), len(settlements), len(balances)
    )
    return balances


def net_positions(balances: Iterable[PairwiseBalance]) -> Dict[str, int]:
    """Net cents per user: positive when owed, negative when owing."""
    net: Dict[str, int] = {}
    for balance in balances:
        net[balance.user_a] = net.get(balance.user_a, 0) + balance.amount_cents
        net[balance.user_b] = net.get(balance.user_b, 0) - balance.amount_cents
    return net


def optimize(balances: Iterable[PairwiseBalance]) -> List[SettlementInstruction]:
    """
    Build a settle-up plan with few transactions.

    Greedy largest-debtor vs largest-creditor matching. Produces at most n-1
    instructions for n users with a nonzero position; not guaranteed to be the
    global minimum.
    """
    net = net_positions(balances)

    debtors = [[user_id, -amount] for user_id, amount in net.items() if amount < 0]
    creditors = [[user_id, amount] for user_id, amount in net.items() if amount > 0]

    # Largest first, identity ascending on ties
    debtors.sort(key=lambda entry: (-entry[1], entry[0]))
    creditors.sort(key=lambda entry: (-entry[1], entry[0]))

    plan: List[SettlementInstruction] = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor[1], creditor[1])
        plan.append(SettlementInstruction(
            from_user=debtor[0],
            to_user=creditor[0],
            amount_cents=amount
        ))

        debtor[1] -= amount
        creditor[1] -= amount

        if debtor[1] == 0:
            i += 1
        if creditor[1] == 0:
            j += 1

    return plan


def net_balance_for(user_id: str, balances: Iterable[PairwiseBalance]) -> NetBalance:
    """Total owed to, owed by, and net position of one user."""
    owed = 0
    owing = 0
    for balance in balances:
        if not balance.involves(user_id):
            continue
        signed = balance.signed_for(user_id)
        if signed > 0:
            owed += signed
        else:
            owing -= signed

    return NetBalance(
        user_id=user_id,
        total_owed_cents=owed,
        total_owing_cents=owing,
        net_cents=owed - owing
    )


class BalanceService:
    @staticmethod
    async def load_pairwise(group: Group) -> List[PairwiseBalance]:
        """Read a group's full history and aggregate it."""
        db = await get_database()
        group_id = str(group.id)

        expenses = await ExpenseRepository(db).list_for_group(group_id)
        settlements = await SettlementRepository(db).list_for_group(group_id)

        return aggregate(
            group_id,
            [expense.to_event() for expense in expenses],
            [settlement.to_event() for settlement in settlements],
            members=group.member_ids()
        )

    @staticmethod
    async def group_balances(group: Group) -> GroupBalancesResponse:
        """Pairwise view and optimized plan, side by side."""
        balances = await BalanceService.load_pairwise(group)
        plan = optimize(balances)

        return GroupBalancesResponse(
            group_id=str(group.id),
            balances=[
                BalanceLine(
                    from_user=balance.debtor,
                    to_user=balance.creditor,
                    amount_cents=balance.magnitude
                )
                for balance in balances
            ],
            optimized=[
                BalanceLine(
                    from_user=instruction.from_user,
                    to_user=instruction.to_user,
                    amount_cents=instruction.amount_cents
                )
                for instruction in plan
            ]
        )

    @staticmethod
    async def user_balance(group: Group, user_id: str) -> NetBalanceResponse:
        balances = await BalanceService.load_pairwise(group)
        net = net_balance_for(user_id, balances)
        return NetBalanceResponse(
            group_id=str(group.id),
            user_id=user_id,
            owed_cents=net.total_owed_cents,
            owing_cents=net.total_owing_cents,
            net_cents=net.net_cents
        )

    @staticmethod
    async def friend_balances(user_id: str) -> List[FriendBalance]:
        """
        Per-counterparty totals for user_id across all active groups.

        Positive net_cents means the friend owes user_id. A group whose history
        fails validation is logged and left out; the other groups still count.
        """
        db = await get_database()
        groups = await GroupRepository(db).list_groups_for_user(user_id)

        friends: Dict[str, FriendBalance] = {}
        for group in groups:
            try:
                balances = await BalanceService.load_pairwise(group)
            except InvalidLedgerEvent as exc:
                logger.warning(
                    "Skipping group %s in friend balances for %s: %s (event %s)",
                    group.id, user_id, exc.message, exc.event_id
                )
                continue

            for balance in balances:
                if not balance.involves(user_id):
                    continue
                friend_id = balance.user_b if balance.user_a == user_id else balance.user_a
                amount = balance.signed_for(user_id)

                friend = friends.setdefault(friend_id, FriendBalance(user_id=friend_id))
                friend.net_cents += amount
                friend.groups.append(FriendGroupBalance(
                    group_id=str(group.id),
                    group_name=group.name,
                    amount_cents=amount
                ))

        result = [friend for friend in friends.values() if friend.net_cents != 0]
        result.sort(key=lambda friend: (-abs(friend.net_cents), friend.user_id))
        return result
