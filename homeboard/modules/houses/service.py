"""House service for house lifecycle and membership management."""

import logging
from typing import Any

from homeboard.core.db_client import Database, RecordNotFoundError, UniqueViolationError
from homeboard.core.errors import BusinessRuleError, ConflictError, NotFoundError
from homeboard.core.logging import span
from homeboard.domain.create_models import HouseCreate
from homeboard.domain.house import (
    House,
    HouseCounts,
    HouseDetail,
    HouseWithMemberInfo,
    MemberInfo,
    Membership,
    MemberWithUser,
    Role,
)
from homeboard.domain.update_models import HouseUpdate
from homeboard.domain.user import UserSummary
from homeboard.modules.houses.policy import REMOVED, would_violate_last_owner
from homeboard.services import user_service


logger = logging.getLogger(__name__)

_MEMBERS_WITH_USER_SQL = """
    SELECT m.*, u.email AS user_email, u.name AS user_name
    FROM house_members m
    JOIN users u ON u.id = m.user_id
"""


def _member_with_user(row: dict[str, Any]) -> MemberWithUser:
    return MemberWithUser.model_validate(
        {
            **row,
            "user": UserSummary(id=row["user_id"], email=row["user_email"], name=row["user_name"]),
        }
    )


def _conflict_from_unique(error: UniqueViolationError) -> ConflictError:
    if "display_name" in error.columns:
        return ConflictError(
            "Display name is already taken in this house",
            fields={"display_name": "already taken"},
        )
    return ConflictError("User is already a member of this house")


async def _get_house_record(db: Database, house_id: str) -> dict[str, Any]:
    try:
        return await db.get_record(collection="houses", record_id=house_id)
    except RecordNotFoundError as e:
        raise NotFoundError("House not found") from e


async def _require_membership(db: Database, house_id: str, user_id: str) -> Membership:
    membership = await get_membership(db=db, house_id=house_id, user_id=user_id)
    if membership is None:
        raise NotFoundError("User is not a member of this house")
    return membership


async def _house_memberships(db: Database, house_id: str) -> list[Membership]:
    records = await db.list_records(collection="house_members", where={"house_id": house_id}, per_page=10_000)
    return [Membership.model_validate(record) for record in records]


async def _get_member_with_user(db: Database, membership_id: str) -> MemberWithUser:
    rows = await db.fetch_all(f"{_MEMBERS_WITH_USER_SQL} WHERE m.id = ?", [membership_id])
    if not rows:
        raise NotFoundError("User is not a member of this house")
    return _member_with_user(rows[0])


async def create_house(*, db: Database, actor_user_id: str, data: HouseCreate, display_name: str) -> House:
    """Create a house with the creating user as its single OWNER.

    The house row and the owner membership are written in one transaction so
    a house without an owner is never visible.

    Args:
        db: Database handle
        actor_user_id: User creating the house
        data: Validated house details
        display_name: Creator's display name in the new house

    Returns:
        Created house

    Raises:
        NotFoundError: If the acting user does not exist
    """
    with span("house_service.create_house"):
        await user_service.get_user(db=db, user_id=actor_user_id)

        async with db.transaction():
            house = await db.create_record(collection="houses", data=data.model_dump())
            await db.create_record(
                collection="house_members",
                data={
                    "user_id": actor_user_id,
                    "house_id": house["id"],
                    "display_name": display_name,
                    "role": Role.OWNER,
                },
            )

        logger.info("Created house %s owned by %s", house["id"], actor_user_id)
        return House.model_validate(house)


async def list_houses_for_user(*, db: Database, user_id: str) -> list[HouseWithMemberInfo]:
    """List every house the user belongs to, newest membership first."""
    with span("house_service.list_houses_for_user"):
        rows = await db.fetch_all(
            """
            SELECT h.*, m.display_name AS member_display_name, m.role AS member_role,
                   m.created AS member_joined_at
            FROM house_members m
            JOIN houses h ON h.id = m.house_id
            WHERE m.user_id = ?
            ORDER BY m.created DESC, m.rowid DESC
            """,
            [user_id],
        )

        return [
            HouseWithMemberInfo.model_validate(
                {
                    **row,
                    "member_info": MemberInfo(
                        display_name=row["member_display_name"],
                        role=row["member_role"],
                        joined_at=row["member_joined_at"],
                    ),
                }
            )
            for row in rows
        ]


async def get_house_detail(*, db: Database, house_id: str) -> HouseDetail:
    """Get a house with its members (join order) and member/task counts.

    Membership gating is the caller's responsibility.

    Raises:
        NotFoundError: If the house does not exist
    """
    with span("house_service.get_house_detail"):
        house = await _get_house_record(db, house_id)
        rows = await db.fetch_all(
            f"{_MEMBERS_WITH_USER_SQL} WHERE m.house_id = ? ORDER BY m.created ASC, m.rowid ASC",
            [house_id],
        )
        members = [_member_with_user(row) for row in rows]
        task_count = await db.count_records(collection="tasks", where={"house_id": house_id})

        return HouseDetail.model_validate(
            {
                **house,
                "members": members,
                "counts": HouseCounts(members=len(members), tasks=task_count),
            }
        )


async def list_members(*, db: Database, house_id: str) -> list[MemberWithUser]:
    """List members of a house, owners first, then by join time."""
    with span("house_service.list_members"):
        rows = await db.fetch_all(
            f"""{_MEMBERS_WITH_USER_SQL}
            WHERE m.house_id = ?
            ORDER BY CASE m.role WHEN 'OWNER' THEN 0 ELSE 1 END, m.created ASC, m.rowid ASC
            """,
            [house_id],
        )
        return [_member_with_user(row) for row in rows]


async def update_house(*, db: Database, house_id: str, data: HouseUpdate) -> House:
    """Apply a partial update to a house. Only fields that were sent change.

    Raises:
        NotFoundError: If the house does not exist
    """
    with span("house_service.update_house"):
        house = await _get_house_record(db, house_id)

        changes: dict[str, Any] = {}
        if "name" in data.model_fields_set:
            changes["name"] = data.name
        if "description" in data.model_fields_set:
            changes["description"] = data.description

        if not changes:
            return House.model_validate(house)

        updated = await db.update_record(collection="houses", record_id=house_id, data=changes)
        logger.info("Updated house %s fields %s", house_id, sorted(changes))
        return House.model_validate(updated)


async def delete_house(*, db: Database, house_id: str) -> None:
    """Delete a house; members, tasks and categories go with it.

    The caller must already have confirmed the actor is an OWNER.

    Raises:
        NotFoundError: If the house does not exist
    """
    with span("house_service.delete_house"):
        try:
            await db.delete_record(collection="houses", record_id=house_id)
        except RecordNotFoundError as e:
            raise NotFoundError("House not found") from e

        logger.info("Deleted house %s", house_id)


async def get_membership(*, db: Database, house_id: str, user_id: str) -> Membership | None:
    """Get a user's membership in a house, or None if they are not a member."""
    record = await db.get_first_record(
        collection="house_members",
        where={"house_id": house_id, "user_id": user_id},
    )
    return Membership.model_validate(record) if record else None


async def add_member(*, db: Database, house_id: str, user_id: str, display_name: str) -> MemberWithUser:
    """Add a user to a house as a MEMBER.

    Raises:
        NotFoundError: If the house or user does not exist
        ConflictError: If the user is already a member or the display name is taken
    """
    with span("house_service.add_member"):
        await _get_house_record(db, house_id)
        await user_service.get_user(db=db, user_id=user_id)

        try:
            record = await db.create_record(
                collection="house_members",
                data={
                    "user_id": user_id,
                    "house_id": house_id,
                    "display_name": display_name,
                    "role": Role.MEMBER,
                },
            )
        except UniqueViolationError as e:
            logger.warning("Rejected membership for %s in house %s: %s", user_id, house_id, e.columns)
            raise _conflict_from_unique(e) from e

        logger.info("User %s joined house %s", user_id, house_id)
        return await _get_member_with_user(db, record["id"])


async def remove_member(*, db: Database, house_id: str, target_user_id: str) -> None:
    """Remove a member from a house, refusing to remove the last owner.

    The owner check and the delete share one write-locked transaction, so two
    concurrent removals cannot both pass the check. The removed member's task
    assignments are dropped by cascade; tasks they created keep a null creator.

    Raises:
        NotFoundError: If the target is not a member
        BusinessRuleError: If the target is the house's last owner
    """
    with span("house_service.remove_member"):
        async with db.transaction():
            target = await _require_membership(db, house_id, target_user_id)
            memberships = await _house_memberships(db, house_id)

            if would_violate_last_owner(memberships, target.id, REMOVED):
                logger.warning("Refused to remove last owner %s of house %s", target_user_id, house_id)
                raise BusinessRuleError("Cannot remove the last owner of the house")

            await db.delete_record(collection="house_members", record_id=target.id)

        logger.info("Removed user %s from house %s", target_user_id, house_id)


async def update_member_role(*, db: Database, house_id: str, target_user_id: str, new_role: Role) -> MemberWithUser:
    """Change a member's role, refusing to demote the last owner.

    Raises:
        NotFoundError: If the target is not a member
        BusinessRuleError: If the change would leave the house without an owner
    """
    with span("house_service.update_member_role"):
        async with db.transaction():
            target = await _require_membership(db, house_id, target_user_id)
            memberships = await _house_memberships(db, house_id)

            if would_violate_last_owner(memberships, target.id, new_role):
                logger.warning("Refused to demote last owner %s of house %s", target_user_id, house_id)
                raise BusinessRuleError("Cannot demote the last owner of the house")

            if target.role != new_role:
                await db.update_record(collection="house_members", record_id=target.id, data={"role": new_role})

        logger.info("Set role of user %s in house %s to %s", target_user_id, house_id, new_role)
        return await _get_member_with_user(db, target.id)


async def is_display_name_available(
    *,
    db: Database,
    house_id: str,
    display_name: str,
    exclude_user_id: str | None = None,
) -> bool:
    """Check whether a display name is free in a house.

    A name held by ``exclude_user_id`` counts as available, so renaming a
    member to their current name is allowed.
    """
    holder = await db.get_first_record(
        collection="house_members",
        where={"house_id": house_id, "display_name": display_name},
    )
    if holder is None:
        return True

    return exclude_user_id is not None and holder["user_id"] == exclude_user_id


async def update_display_name(*, db: Database, house_id: str, user_id: str, display_name: str) -> MemberWithUser:
    """Rename a member within a house.

    Raises:
        NotFoundError: If the user is not a member
        ConflictError: If another member already uses the name
    """
    with span("house_service.update_display_name"):
        membership = await _require_membership(db, house_id, user_id)

        if not await is_display_name_available(
            db=db, house_id=house_id, display_name=display_name, exclude_user_id=user_id
        ):
            raise ConflictError(
                "Display name is already taken in this house",
                fields={"display_name": "already taken"},
            )

        if membership.display_name != display_name:
            try:
                await db.update_record(
                    collection="house_members",
                    record_id=membership.id,
                    data={"display_name": display_name},
                )
            except UniqueViolationError as e:
                raise _conflict_from_unique(e) from e

        logger.info("Renamed member %s in house %s", user_id, house_id)
        return await _get_member_with_user(db, membership.id)
