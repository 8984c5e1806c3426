"""House and membership endpoints."""

import logging

from fastapi import APIRouter, Response, status
from pydantic import field_validator

from homeboard.domain.create_models import HouseCreate, MembershipCreate, validate_display_name
from homeboard.domain.house import House, HouseDetail, HouseWithMemberInfo, MemberWithUser
from homeboard.domain.update_models import DisplayNameUpdate, HouseUpdate, MemberRoleUpdate
from homeboard.interface.dependencies import DbDep, MemberDep, OwnerDep, UserIdDep
from homeboard.modules.houses import service as house_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/houses", tags=["houses"])


class CreateHouseRequest(HouseCreate):
    """House details plus the creator's display name in the new house."""

    display_name: str

    @field_validator("display_name")
    @classmethod
    def check_display_name(cls, v: str) -> str:
        return validate_display_name(v)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_house(body: CreateHouseRequest, db: DbDep, user_id: UserIdDep) -> House:
    """Create a house owned by the caller."""
    return await house_service.create_house(
        db=db,
        actor_user_id=user_id,
        data=HouseCreate(name=body.name, description=body.description),
        display_name=body.display_name,
    )


@router.get("")
async def list_houses(db: DbDep, user_id: UserIdDep) -> list[HouseWithMemberInfo]:
    """List the caller's houses."""
    return await house_service.list_houses_for_user(db=db, user_id=user_id)


@router.get("/{house_id}")
async def get_house(house_id: str, db: DbDep, _actor: MemberDep) -> HouseDetail:
    return await house_service.get_house_detail(db=db, house_id=house_id)


@router.put("/{house_id}")
async def update_house(house_id: str, body: HouseUpdate, db: DbDep, _actor: OwnerDep) -> House:
    return await house_service.update_house(db=db, house_id=house_id, data=body)


@router.delete("/{house_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_house(house_id: str, db: DbDep, _actor: OwnerDep) -> Response:
    await house_service.delete_house(db=db, house_id=house_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{house_id}/members")
async def list_members(house_id: str, db: DbDep, _actor: MemberDep) -> list[MemberWithUser]:
    return await house_service.list_members(db=db, house_id=house_id)


@router.post("/{house_id}/members", status_code=status.HTTP_201_CREATED)
async def add_member(house_id: str, body: MembershipCreate, db: DbDep, _actor: OwnerDep) -> MemberWithUser:
    """Add an existing user to the house as a member."""
    return await house_service.add_member(
        db=db,
        house_id=house_id,
        user_id=body.user_id,
        display_name=body.display_name,
    )


@router.delete("/{house_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(house_id: str, user_id: str, db: DbDep, _actor: OwnerDep) -> Response:
    await house_service.remove_member(db=db, house_id=house_id, target_user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{house_id}/members/{user_id}/role")
async def update_member_role(
    house_id: str,
    user_id: str,
    body: MemberRoleUpdate,
    db: DbDep,
    _actor: OwnerDep,
) -> MemberWithUser:
    return await house_service.update_member_role(
        db=db,
        house_id=house_id,
        target_user_id=user_id,
        new_role=body.role,
    )


@router.put("/{house_id}/display-name")
async def update_display_name(house_id: str, body: DisplayNameUpdate, db: DbDep, actor: MemberDep) -> MemberWithUser:
    """Rename the caller within the house."""
    return await house_service.update_display_name(
        db=db,
        house_id=house_id,
        user_id=actor.user_id,
        display_name=body.display_name,
    )
