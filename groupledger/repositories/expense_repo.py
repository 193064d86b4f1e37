from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from typing import Optional, List

from groupledger.models.expense import Expense


class ExpenseRepository:
    """Expense database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.expenses

    async def insert_expense(self, expense: Expense) -> Expense:
        result = await self.collection.insert_one(expense.model_dump(by_alias=True))
        expense.id = result.inserted_id
        return expense

    async def get_expense(self, expense_id: str) -> Optional[Expense]:
        if not ObjectId.is_valid(expense_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(expense_id)})
        if doc:
            return Expense(**doc)
        return None

    async def list_for_group(
        self,
        group_id: str,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> List[Expense]:
        """Expenses for a group, newest first. No limit returns the full history."""
        cursor = self.collection.find({"group_id": ObjectId(group_id)}).sort("created_at", -1)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        docs = await cursor.to_list(None)
        return [Expense(**doc) for doc in docs]

    async def count_for_group(self, group_id: str) -> int:
        return await self.collection.count_documents({"group_id": ObjectId(group_id)})

    async def delete_expense(self, expense_id: str) -> bool:
        result = await self.collection.delete_one({"_id": ObjectId(expense_id)})
        return result.deleted_count == 1

    async def update_expense(self, expense: Expense) -> Expense:
        doc = expense.model_dump(by_alias=True, exclude={"id", "created_at"})
        await self.collection.update_one({"_id": expense.id}, {"$set": doc})
        return expense
