"""
Ledger engine value types.

Design principles:
- Events are read-only inputs handed in by the persistence layer
- Everything derived (balances, plans, net figures) is recomputed per call
- All amounts in integer cents, never floats
- User identities are opaque strings ordered by plain string comparison
"""

from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field, StrictInt


class LedgerValue(BaseModel):
    model_config = ConfigDict(frozen=True)


class Share(LedgerValue):
    """One participant's portion of an expense."""
    user_id: str
    amount_cents: StrictInt


class ExpenseEvent(LedgerValue):
    """
    Expense paid by one user and split across participants.

    Invariant (checked at aggregation time):
    - sum(share.amount_cents) == total_cents exactly
    """
    event_id: str
    group_id: str
    payer_id: str
    total_cents: StrictInt
    shares: Tuple[Share, ...] = ()


class SettlementEvent(LedgerValue):
    """Direct repayment: payer_id paid receiver_id amount_cents."""
    event_id: str
    group_id: str
    payer_id: str
    receiver_id: str
    amount_cents: StrictInt


class PairwiseBalance(LedgerValue):
    """
    Net amount between two users, stored once per unordered pair.

    user_a < user_b always. Positive amount_cents means user_b owes user_a,
    negative means user_a owes user_b.
    """
    user_a: str
    user_b: str
    amount_cents: StrictInt

    @property
    def key(self) -> Tuple[str, str]:
        return (self.user_a, self.user_b)

    @property
    def debtor(self) -> str:
        return self.user_b if self.amount_cents > 0 else self.user_a

    @property
    def creditor(self) -> str:
        return self.user_a if self.amount_cents > 0 else self.user_b

    @property
    def magnitude(self) -> int:
        return abs(self.amount_cents)

    def involves(self, user_id: str) -> bool:
        return user_id == self.user_a or user_id == self.user_b

    def signed_for(self, user_id: str) -> int:
        """Amount from user_id's point of view: positive when they are owed."""
        if user_id == self.user_a:
            return self.amount_cents
        if user_id == self.user_b:
            return -self.amount_cents
        return 0


class NetBalance(LedgerValue):
    user_id: str
    total_owed_cents: StrictInt = 0
    total_owing_cents: StrictInt = 0
    net_cents: StrictInt = 0


class SettlementInstruction(LedgerValue):
    """Proposed payment from_user -> to_user."""
    from_user: str
    to_user: str
    amount_cents: StrictInt = Field(gt=0)
