"""Category service for house-scoped task categories."""

import logging

from homeboard.core.db_client import Database, UniqueViolationError
from homeboard.core.errors import ConflictError, NotFoundError
from homeboard.core.logging import span
from homeboard.domain.category import Category
from homeboard.domain.create_models import CategoryCreate


logger = logging.getLogger(__name__)


async def create_category(*, db: Database, house_id: str, data: CategoryCreate) -> Category:
    """Create a category in a house.

    Raises:
        ConflictError: If the house already has a category with that name
    """
    with span("category_service.create_category"):
        try:
            record = await db.create_record(
                collection="categories",
                data={"house_id": house_id, **data.model_dump()},
            )
        except UniqueViolationError as e:
            raise ConflictError(
                "A category with this name already exists in this house",
                fields={"name": "already exists"},
            ) from e

        logger.info("Created category %s in house %s", record["id"], house_id)
        return Category.model_validate(record)


async def list_categories(*, db: Database, house_id: str) -> list[Category]:
    """List a house's categories alphabetically."""
    records = await db.list_records(collection="categories", where={"house_id": house_id}, sort="+name")
    return [Category.model_validate(record) for record in records]


async def find_category(*, db: Database, house_id: str, category_id: str) -> Category | None:
    """Look up a category by ID within a house; other houses' categories are invisible."""
    record = await db.get_first_record(collection="categories", where={"id": category_id, "house_id": house_id})
    return Category.model_validate(record) if record else None


async def get_category(*, db: Database, house_id: str, category_id: str) -> Category:
    """Get a category scoped to a house.

    Raises:
        NotFoundError: If the category does not exist in the house
    """
    category = await find_category(db=db, house_id=house_id, category_id=category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


async def delete_category(*, db: Database, house_id: str, category_id: str) -> None:
    """Delete a category; tasks that used it become uncategorised.

    Raises:
        NotFoundError: If the category does not exist in the house
    """
    with span("category_service.delete_category"):
        category = await get_category(db=db, house_id=house_id, category_id=category_id)
        await db.delete_record(collection="categories", record_id=category.id)
        logger.info("Deleted category %s from house %s", category_id, house_id)
