"""
Expense model - one payment shared by several group members.

Design principles:
- Edits replace the whole split list and are re-validated like a new expense
- All amounts in integer cents
- splits always hold concrete cents, even for equal splits
"""

from typing import List
from enum import Enum
from pydantic import BaseModel, ConfigDict, StrictInt

from groupledger.models.base import MongoModel, PyObjectId
from groupledger.models.ledger import ExpenseEvent, Share


class SplitType(str, Enum):
    EQUAL = "equal"
    CUSTOM = "custom"


class ExpenseSplit(BaseModel):
    user_id: str
    amount_cents: StrictInt


class Expense(MongoModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    group_id: PyObjectId
    description: str
    amount_cents: StrictInt
    paid_by: str
    split_type: SplitType = SplitType.EQUAL
    splits: List[ExpenseSplit] = []
    created_by: str

    def to_event(self) -> ExpenseEvent:
        return ExpenseEvent(
            event_id=str(self.id),
            group_id=str(self.group_id),
            payer_id=self.paid_by,
            total_cents=self.amount_cents,
            shares=tuple(
                Share(user_id=split.user_id, amount_cents=split.amount_cents)
                for split in self.splits
            )
        )
