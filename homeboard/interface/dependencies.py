"""FastAPI dependencies resolving the store handle and the acting member."""

import logging
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from homeboard.core.db_client import Database
from homeboard.core.errors import ForbiddenError
from homeboard.domain.house import Actor
from homeboard.modules.houses import service as house_service
from homeboard.modules.houses.policy import can_moderate_house


logger = logging.getLogger(__name__)


def get_db(request: Request) -> Database:
    """Return the database handle opened by the application lifespan."""
    return request.app.state.db


async def get_current_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Read the authenticated user ID forwarded by the gateway."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return x_user_id


DbDep = Annotated[Database, Depends(get_db)]
UserIdDep = Annotated[str, Depends(get_current_user_id)]


async def require_house_member(house_id: str, db: DbDep, user_id: UserIdDep) -> Actor:
    """Resolve the caller's membership in the house from the path."""
    membership = await house_service.get_membership(db=db, house_id=house_id, user_id=user_id)
    if membership is None:
        logger.warning("house_access_denied", extra={"house_id": house_id, "user_id": user_id})
        raise ForbiddenError("You are not a member of this house")

    return Actor(user_id=user_id, membership_id=membership.id, role=membership.role)


MemberDep = Annotated[Actor, Depends(require_house_member)]


async def require_house_owner(actor: MemberDep) -> Actor:
    """Allow only house owners through."""
    if not can_moderate_house(actor.role):
        logger.warning("owner_access_denied", extra={"membership_id": actor.membership_id})
        raise ForbiddenError("Only house owners can perform this action")
    return actor


OwnerDep = Annotated[Actor, Depends(require_house_owner)]
