from typing import List
from fastapi import APIRouter, Depends, Query, status
from groupledger.core.auth import CurrentUser, get_current_user
from groupledger.schemas.group import GroupCreate, GroupAddMember, GroupResponse
from groupledger.services.group_service import GroupService

router = APIRouter()

@router.post("/", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_in: GroupCreate,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a group; the caller becomes its admin"""
    group = await GroupService.create(group_in, current_user.id)
    return GroupResponse.from_group(group)

@router.get("/", response_model=List[GroupResponse])
async def list_groups(
    include_archived: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List the caller's groups, archived ones only on request"""
    groups = await GroupService.list_for_user(current_user.id, include_archived=include_archived)
    return [GroupResponse.from_group(group) for group in groups]

@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    group = await GroupService.get_for_member(group_id, current_user.id)
    return GroupResponse.from_group(group)

@router.post("/{group_id}/members", response_model=GroupResponse)
async def add_member(
    group_id: str,
    payload: GroupAddMember,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Add a member (admin only)"""
    group = await GroupService.add_member(group_id, payload, current_user.id)
    return GroupResponse.from_group(group)

@router.post("/{group_id}/archive", response_model=GroupResponse)
async def archive_group(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Hide a group from the default list (admin only)"""
    group = await GroupService.set_archived(group_id, current_user.id, True)
    return GroupResponse.from_group(group)

@router.post("/{group_id}/unarchive", response_model=GroupResponse)
async def unarchive_group(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    group = await GroupService.set_archived(group_id, current_user.id, False)
    return GroupResponse.from_group(group)
