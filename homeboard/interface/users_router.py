"""User registration and profile endpoints.

Credentials are handled by the authenticating gateway; these endpoints only
manage the profile records the rest of the API refers to.
"""

from fastapi import APIRouter, status

from homeboard.domain.create_models import UserCreate
from homeboard.domain.user import User
from homeboard.interface.dependencies import DbDep, UserIdDep
from homeboard.services import user_service


router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_user(body: UserCreate, db: DbDep) -> User:
    return await user_service.create_user(db=db, data=body)


@router.get("/me")
async def get_current_user(db: DbDep, user_id: UserIdDep) -> User:
    return await user_service.get_user(db=db, user_id=user_id)
