from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from typing import Optional, List

from groupledger.models.base import utcnow
from groupledger.models.group import Group, GroupMember, MemberRole


class GroupRepository:
    """Group database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.groups

    async def create_group(self, name: str, description: Optional[str], creator_id: str) -> Group:
        """Create a group with the creator as its first admin."""
        group = Group(
            name=name,
            description=description,
            created_by=creator_id,
            members=[GroupMember(user_id=creator_id, role=MemberRole.ADMIN)]
        )
        result = await self.collection.insert_one(group.model_dump(by_alias=True))
        group.id = result.inserted_id
        return group

    async def get_group(self, group_id: str) -> Optional[Group]:
        if not ObjectId.is_valid(group_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(group_id)})
        if doc:
            return Group(**doc)
        return None

    async def list_groups_for_user(self, user_id: str, include_archived: bool = False) -> List[Group]:
        """Groups the user belongs to, newest first."""
        query = {"members.user_id": user_id}
        if not include_archived:
            query["is_archived"] = False
        docs = await self.collection.find(query).sort("created_at", -1).to_list(None)
        return [Group(**doc) for doc in docs]

    async def add_member(self, group_id: str, user_id: str, role: str = "member") -> Optional[Group]:
        """Add a member unless already present. Returns the updated group."""
        member = GroupMember(user_id=user_id, role=role)
        await self.collection.update_one(
            {"_id": ObjectId(group_id), "members.user_id": {"$ne": user_id}},
            {
                "$push": {"members": member.model_dump()},
                "$set": {"updated_at": utcnow()}
            }
        )
        return await self.get_group(group_id)

    async def set_archived(self, group_id: str, archived: bool) -> Optional[Group]:
        await self.collection.update_one(
            {"_id": ObjectId(group_id)},
            {"$set": {"is_archived": archived, "updated_at": utcnow()}}
        )
        return await self.get_group(group_id)
