from datetime import datetime
from pydantic import Field, StrictInt
from groupledger.models.base import MongoModel, PyObjectId, utcnow
from groupledger.models.ledger import SettlementEvent

class Settlement(MongoModel):
    group_id: PyObjectId
    from_user: str
    to_user: str
    amount_cents: StrictInt
    settled_by: str
    notes: str = ""
    settled_at: datetime = Field(default_factory=utcnow)

    def to_event(self) -> SettlementEvent:
        return SettlementEvent(
            event_id=str(self.id),
            group_id=str(self.group_id),
            payer_id=self.from_user,
            receiver_id=self.to_user,
            amount_cents=self.amount_cents
        )
