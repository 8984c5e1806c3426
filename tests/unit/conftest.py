"""Pytest configuration and fixtures for unit tests."""

import itertools
from collections.abc import AsyncIterator
from dataclasses import dataclass

import pytest

from homeboard.core.db_client import Database
from homeboard.core.schema import init_db
from homeboard.domain.create_models import HouseCreate, TaskCreate, UserCreate
from homeboard.domain.house import Actor, House
from homeboard.domain.task import Task
from homeboard.domain.user import User
from homeboard.modules.houses import service as house_service
from homeboard.modules.tasks import service as task_service
from homeboard.services import user_service


@pytest.fixture
async def db() -> AsyncIterator[Database]:
    """Provides a fresh in-memory database with the schema applied."""
    database = Database(":memory:")
    await database.connect()
    await init_db(database)
    yield database
    await database.close()


@pytest.fixture
def make_user(db):
    """Factory creating users with unique emails."""
    counter = itertools.count(1)

    async def _make_user(name: str | None = None) -> User:
        n = next(counter)
        return await user_service.create_user(
            db=db,
            data=UserCreate(email=f"user{n}@example.com", name=name or f"User {n}"),
        )

    return _make_user


@pytest.fixture
def make_house(db, make_user):
    """Factory creating a house owned by ``owner`` (a new user when omitted)."""

    async def _make_house(owner: User | None = None, name: str = "Test House", display_name: str = "Owner") -> House:
        owner = owner or await make_user()
        return await house_service.create_house(
            db=db,
            actor_user_id=owner.id,
            data=HouseCreate(name=name),
            display_name=display_name,
        )

    return _make_house


@pytest.fixture
def actor_for(db):
    """Build the acting member context for a user in a house."""

    async def _actor_for(house_id: str, user_id: str) -> Actor:
        membership = await house_service.get_membership(db=db, house_id=house_id, user_id=user_id)
        assert membership is not None
        return Actor(user_id=user_id, membership_id=membership.id, role=membership.role)

    return _actor_for


@dataclass
class Household:
    """A house with an owner ("Dad") and two plain members ("Mom", "Kid")."""

    house: House
    owner: Actor
    member: Actor
    other: Actor


@pytest.fixture
async def household(db, make_user, make_house, actor_for) -> Household:
    dad = await make_user("Dad")
    mom = await make_user("Mom")
    kid = await make_user("Kid")

    house = await make_house(owner=dad, name="Family Home", display_name="Dad")
    await house_service.add_member(db=db, house_id=house.id, user_id=mom.id, display_name="Mom")
    await house_service.add_member(db=db, house_id=house.id, user_id=kid.id, display_name="Kid")

    return Household(
        house=house,
        owner=await actor_for(house.id, dad.id),
        member=await actor_for(house.id, mom.id),
        other=await actor_for(house.id, kid.id),
    )


@pytest.fixture
def make_task(db):
    """Factory creating a task in a house on behalf of ``creator``."""

    async def _make_task(house_id: str, creator: Actor, **fields) -> Task:
        data = TaskCreate(**{"title": "Take out the bins", **fields})
        return await task_service.create_task(
            db=db,
            house_id=house_id,
            created_by_id=creator.membership_id,
            data=data,
        )

    return _make_task
