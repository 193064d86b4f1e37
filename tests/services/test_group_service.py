import pytest
from unittest.mock import patch
from bson import ObjectId
from fastapi import HTTPException

from groupledger.schemas.group import GroupCreate, GroupAddMember
from groupledger.services.group_service import GroupService


@pytest.mark.asyncio
async def test_create_group_makes_creator_admin(mock_db):
    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        group = await GroupService.create(GroupCreate(name="Trip"), "alice")

    assert group.name == "Trip"
    assert group.created_by == "alice"
    assert group.is_admin("alice")
    doc = mock_db.groups.insert_one.call_args[0][0]
    assert doc["members"][0]["user_id"] == "alice"
    assert doc["members"][0]["role"] == "admin"


@pytest.mark.asyncio
async def test_get_for_member_missing_group(mock_db):
    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        with pytest.raises(HTTPException) as exc_info:
            await GroupService.get_for_member(str(ObjectId()), "alice")

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_get_for_member_invalid_id(mock_db):
    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        with pytest.raises(HTTPException) as exc_info:
            await GroupService.get_for_member("not-an-id", "alice")

    assert exc_info.value.status_code == 404
    mock_db.groups.find_one.assert_not_called()


@pytest.mark.asyncio
async def test_get_for_member_non_member(mock_db, group):
    mock_db.groups.find_one.return_value = group.model_dump(by_alias=True)

    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        with pytest.raises(HTTPException) as exc_info:
            await GroupService.get_for_member(str(group.id), "mallory")

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_add_member_requires_admin(mock_db, group):
    mock_db.groups.find_one.return_value = group.model_dump(by_alias=True)

    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        with pytest.raises(HTTPException) as exc_info:
            await GroupService.add_member(str(group.id), GroupAddMember(user_id="dave"), "bob")

    assert exc_info.value.status_code == 403
    mock_db.groups.update_one.assert_not_called()


@pytest.mark.asyncio
async def test_add_member_by_admin(mock_db, group):
    mock_db.groups.find_one.return_value = group.model_dump(by_alias=True)

    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        await GroupService.add_member(str(group.id), GroupAddMember(user_id="dave"), "alice")

    mock_db.groups.update_one.assert_called_once()
    update = mock_db.groups.update_one.call_args[0][1]
    assert update["$push"]["members"]["user_id"] == "dave"
    assert update["$push"]["members"]["role"] == "member"


@pytest.mark.asyncio
async def test_archive_by_admin(mock_db, group):
    stored = group.model_dump(by_alias=True)
    archived = {**stored, "is_archived": True}
    mock_db.groups.find_one.side_effect = [stored, archived]

    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        result = await GroupService.set_archived(str(group.id), "alice", True)

    assert result.is_archived is True
    filter_doc, update = mock_db.groups.update_one.call_args[0]
    assert filter_doc == {"_id": group.id}
    assert update["$set"]["is_archived"] is True


@pytest.mark.asyncio
async def test_unarchive_requires_admin(mock_db, group):
    mock_db.groups.find_one.return_value = group.model_dump(by_alias=True)

    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        with pytest.raises(HTTPException) as exc_info:
            await GroupService.set_archived(str(group.id), "bob", False)

    assert exc_info.value.status_code == 403
    mock_db.groups.update_one.assert_not_called()


@pytest.mark.asyncio
async def test_list_for_user_hides_archived_by_default(mock_db, find_returns):
    find_returns(mock_db.groups, [])

    with patch("groupledger.services.group_service.get_database", return_value=mock_db):
        await GroupService.list_for_user("alice")
        await GroupService.list_for_user("alice", include_archived=True)

    default_query, archived_query = [call.args[0] for call in mock_db.groups.find.call_args_list]
    assert default_query == {"members.user_id": "alice", "is_archived": False}
    assert archived_query == {"members.user_id": "alice"}
