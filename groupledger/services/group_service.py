import logging
from typing import List

from fastapi import HTTPException, status

from groupledger.db.session import get_database
from groupledger.models.group import Group
from groupledger.repositories.group_repo import GroupRepository
from groupledger.schemas.group import GroupCreate, GroupAddMember

logger = logging.getLogger(__name__)


class GroupService:
    @staticmethod
    async def create(group_in: GroupCreate, user_id: str) -> Group:
        db = await get_database()
        group = await GroupRepository(db).create_group(group_in.name, group_in.description, user_id)
        logger.info("Group %s created by %s", group.id, user_id)
        return group

    @staticmethod
    async def list_for_user(user_id: str, include_archived: bool = False) -> List[Group]:
        db = await get_database()
        return await GroupRepository(db).list_groups_for_user(user_id, include_archived=include_archived)

    @staticmethod
    async def get_for_member(group_id: str, user_id: str) -> Group:
        """Load a group the caller belongs to, or raise 404/403."""
        db = await get_database()
        group = await GroupRepository(db).get_group(group_id)
        if not group:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
        if not group.is_member(user_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a member of this group")
        return group

    @staticmethod
    async def add_member(group_id: str, payload: GroupAddMember, user_id: str) -> Group:
        group = await GroupService.get_for_member(group_id, user_id)
        if not group.is_admin(user_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin permissions required")

        db = await get_database()
        updated = await GroupRepository(db).add_member(group_id, payload.user_id, payload.role)
        logger.info("User %s added to group %s", payload.user_id, group_id)
        return updated

    @staticmethod
    async def set_archived(group_id: str, user_id: str, archived: bool) -> Group:
        """
        Archive or restore a group (admin only).

        Archived groups keep their history and balances but drop out of the
        default group list and the cross-group friend totals.
        """
        group = await GroupService.get_for_member(group_id, user_id)
        if not group.is_admin(user_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin permissions required")

        db = await get_database()
        updated = await GroupRepository(db).set_archived(group_id, archived)
        logger.info("Group %s %s by %s", group_id, "archived" if archived else "unarchived", user_id)
        return updated
