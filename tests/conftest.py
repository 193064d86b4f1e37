import pytest
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from fastapi.testclient import TestClient

from groupledger.main import app
from groupledger.core.auth import CurrentUser, get_current_user, create_access_token
from groupledger.models.group import Group, GroupMember, MemberRole

ALICE = "alice"
BOB = "bob"
CAROL = "carol"


@pytest.fixture
def mock_db():
    """Stand-in for the motor database with async collection methods."""
    db = MagicMock()
    for name in ("groups", "expenses", "settlements"):
        collection = getattr(db, name)
        collection.insert_one = AsyncMock(side_effect=lambda doc, **kwargs: MagicMock(inserted_id=doc["_id"]))
        collection.find_one = AsyncMock(return_value=None)
        collection.update_one = AsyncMock()
        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
        collection.count_documents = AsyncMock(return_value=0)
    return db


@pytest.fixture
def find_returns():
    """Make collection.find(...) yield the given documents through any cursor chain."""
    def _set(collection, docs):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.skip.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.to_list = AsyncMock(return_value=docs)
        collection.find.return_value = cursor
        return cursor
    return _set


@pytest.fixture
def group():
    """Group of alice (admin), bob and carol."""
    return Group(
        id=ObjectId(),
        name="Trip",
        created_by=ALICE,
        members=[
            GroupMember(user_id=ALICE, role=MemberRole.ADMIN),
            GroupMember(user_id=BOB),
            GroupMember(user_id=CAROL),
        ]
    )


@pytest.fixture
def client():
    """TestClient without lifespan, so no MongoDB connection is attempted."""
    return TestClient(app)


@pytest.fixture
def as_alice():
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id=ALICE)
    yield CurrentUser(id=ALICE)
    app.dependency_overrides.clear()


@pytest.fixture
def alice_token():
    return create_access_token(ALICE)
