from typing import List
from pydantic import BaseModel, Field


class BalanceLine(BaseModel):
    """from_user owes (or should pay) to_user amount_cents."""
    from_user: str
    to_user: str
    amount_cents: int


class GroupBalancesResponse(BaseModel):
    """Raw pairwise balances plus the simplified settle-up plan."""
    group_id: str
    balances: List[BalanceLine] = []
    optimized: List[BalanceLine] = []


class NetBalanceResponse(BaseModel):
    group_id: str
    user_id: str
    owed_cents: int
    owing_cents: int
    net_cents: int


class FriendGroupBalance(BaseModel):
    group_id: str
    group_name: str
    amount_cents: int


class FriendBalance(BaseModel):
    """Net position with one counterparty across groups (positive = they owe you)."""
    user_id: str
    net_cents: int = 0
    groups: List[FriendGroupBalance] = Field(default_factory=list)
