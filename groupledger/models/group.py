from typing import Optional, List
from pydantic import Field, BaseModel, ConfigDict
from groupledger.models.base import MongoModel, utcnow
from datetime import datetime
from enum import Enum

class MemberRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"

# Embedded documents don't need MongoModel (no separate _id)
class GroupMember(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    user_id: str
    role: MemberRole = MemberRole.MEMBER
    joined_at: datetime = Field(default_factory=utcnow)

class Group(MongoModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str
    description: Optional[str] = None
    created_by: str
    members: List[GroupMember] = []
    is_archived: bool = False

    def member_ids(self) -> List[str]:
        return [member.user_id for member in self.members]

    def is_member(self, user_id: str) -> bool:
        return any(member.user_id == user_id for member in self.members)

    def is_admin(self, user_id: str) -> bool:
        return any(
            member.user_id == user_id and member.role == MemberRole.ADMIN
            for member in self.members
        )
