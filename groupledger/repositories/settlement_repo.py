from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from typing import Optional, List

from groupledger.models.settlement import Settlement


class SettlementRepository:
    """Settlement database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.settlements

    async def insert_settlement(self, settlement: Settlement) -> Settlement:
        result = await self.collection.insert_one(settlement.model_dump(by_alias=True))
        settlement.id = result.inserted_id
        return settlement

    async def get_settlement(self, settlement_id: str) -> Optional[Settlement]:
        if not ObjectId.is_valid(settlement_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(settlement_id)})
        if doc:
            return Settlement(**doc)
        return None

    async def list_for_group(self, group_id: str) -> List[Settlement]:
        """All settlements for a group, most recent first."""
        docs = await self.collection.find(
            {"group_id": ObjectId(group_id)}
        ).sort("settled_at", -1).to_list(None)
        return [Settlement(**doc) for doc in docs]

    async def delete_settlement(self, settlement_id: str) -> bool:
        result = await self.collection.delete_one({"_id": ObjectId(settlement_id)})
        return result.deleted_count == 1
