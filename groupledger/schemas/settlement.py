from pydantic import BaseModel, Field, StrictInt
from datetime import datetime

class SettlementCreate(BaseModel):
    group_id: str
    from_user: str
    to_user: str
    amount_cents: StrictInt = Field(..., gt=0)
    notes: str = Field("", max_length=200)

class SettlementResponse(BaseModel):
    id: str
    group_id: str
    from_user: str
    to_user: str
    amount_cents: int
    settled_by: str
    notes: str
    settled_at: datetime

    @classmethod
    def from_settlement(cls, settlement) -> "SettlementResponse":
        return cls(
            id=str(settlement.id),
            group_id=str(settlement.group_id),
            from_user=settlement.from_user,
            to_user=settlement.to_user,
            amount_cents=settlement.amount_cents,
            settled_by=settlement.settled_by,
            notes=settlement.notes,
            settled_at=settlement.settled_at
        )
