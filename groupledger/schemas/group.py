from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class GroupAddMember(BaseModel):
    user_id: str = Field(..., min_length=1)
    role: str = Field("member", pattern="^(admin|member)$")


class MemberResponse(BaseModel):
    user_id: str
    role: str
    joined_at: datetime

    model_config = {"from_attributes": True}


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by: str
    members: List[MemberResponse]
    is_archived: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_group(cls, group) -> "GroupResponse":
        return cls(
            id=str(group.id),
            name=group.name,
            description=group.description,
            created_by=group.created_by,
            members=[MemberResponse.model_validate(member) for member in group.members],
            is_archived=group.is_archived,
            created_at=group.created_at,
            updated_at=group.updated_at
        )
