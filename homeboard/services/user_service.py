"""User service for account records referenced by memberships."""

import logging

from homeboard.core.db_client import Database, RecordNotFoundError, UniqueViolationError
from homeboard.core.errors import ConflictError, NotFoundError
from homeboard.core.logging import span
from homeboard.domain.create_models import UserCreate
from homeboard.domain.user import User


logger = logging.getLogger(__name__)


async def create_user(*, db: Database, data: UserCreate) -> User:
    """Create a user account record.

    Args:
        db: Database handle
        data: Validated user payload

    Returns:
        Created user

    Raises:
        ConflictError: If the email is already registered
    """
    with span("user_service.create_user"):
        try:
            record = await db.create_record(collection="users", data=data.model_dump())
        except UniqueViolationError as e:
            logger.warning("Rejected duplicate email registration", extra={"email": data.email})
            raise ConflictError("Email is already registered", fields={"email": "already registered"}) from e

        logger.info("Created user %s", record["id"])
        return User.model_validate(record)


async def get_user(*, db: Database, user_id: str) -> User:
    """Get user by ID.

    Raises:
        NotFoundError: If user not found
    """
    try:
        record = await db.get_record(collection="users", record_id=user_id)
    except RecordNotFoundError as e:
        raise NotFoundError("User not found") from e
    return User.model_validate(record)
