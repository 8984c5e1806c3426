"""Category endpoints nested under a house."""

from fastapi import APIRouter, Response, status

from homeboard.domain.category import Category
from homeboard.domain.create_models import CategoryCreate
from homeboard.interface.dependencies import DbDep, MemberDep, OwnerDep
from homeboard.modules.categories import service as category_service


router = APIRouter(prefix="/houses/{house_id}/categories", tags=["categories"])


@router.get("")
async def list_categories(house_id: str, db: DbDep, _actor: MemberDep) -> list[Category]:
    return await category_service.list_categories(db=db, house_id=house_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(house_id: str, body: CategoryCreate, db: DbDep, _actor: MemberDep) -> Category:
    return await category_service.create_category(db=db, house_id=house_id, data=body)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(house_id: str, category_id: str, db: DbDep, _actor: OwnerDep) -> Response:
    """Delete a category; its tasks become uncategorised."""
    await category_service.delete_category(db=db, house_id=house_id, category_id=category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
