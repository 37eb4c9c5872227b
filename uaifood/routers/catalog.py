"""
Catalog Endpoints

Categories and menu items. Reads are open to any authenticated user;
writes are restricted to administrators.
"""

from typing import List

from fastapi import APIRouter, Depends

from uaifood.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryWithItems,
    ErrorResponse,
    ItemCreate,
    ItemResponse,
    MessageResponse,
)
from uaifood.services.access import Action
from uaifood.services.catalog import CatalogService
from uaifood.routers.deps import EntityId, get_catalog_service, require

read_access = [Depends(require(Action.CATALOG_READ))]
write_access = [Depends(require(Action.CATALOG_WRITE))]

categories_router = APIRouter(prefix="/categories", tags=["Categories"])
items_router = APIRouter(prefix="/items", tags=["Items"])


# =============================================================================
# CATEGORIES
# =============================================================================

@categories_router.get("", response_model=List[CategoryWithItems], dependencies=read_access)
async def list_categories(service: CatalogService = Depends(get_catalog_service)):
    return await service.list_categories()


@categories_router.get(
    "/{category_id}",
    response_model=CategoryWithItems,
    dependencies=read_access,
    responses={404: {"model": ErrorResponse}},
)
async def get_category(
    category_id: EntityId,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.get_category(category_id)


@categories_router.post(
    "",
    response_model=CategoryResponse,
    status_code=201,
    dependencies=write_access,
)
async def create_category(
    category_data: CategoryCreate,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.create_category(category_data)


@categories_router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    dependencies=write_access,
    responses={404: {"model": ErrorResponse}},
)
async def update_category(
    category_id: EntityId,
    category_data: CategoryCreate,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_category(category_id, category_data)


@categories_router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    dependencies=write_access,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_category(
    category_id: EntityId,
    service: CatalogService = Depends(get_catalog_service),
):
    await service.delete_category(category_id)
    return MessageResponse(message="Category deleted successfully.")


# =============================================================================
# ITEMS
# =============================================================================

@items_router.get("", response_model=List[ItemResponse], dependencies=read_access)
async def list_items(service: CatalogService = Depends(get_catalog_service)):
    return await service.list_items()


@items_router.get(
    "/{item_id}",
    response_model=ItemResponse,
    dependencies=read_access,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: EntityId,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.get_item(item_id)


@items_router.post(
    "",
    response_model=ItemResponse,
    status_code=201,
    dependencies=write_access,
    responses={404: {"model": ErrorResponse}},
)
async def create_item(
    item_data: ItemCreate,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.create_item(item_data)


@items_router.put(
    "/{item_id}",
    response_model=ItemResponse,
    dependencies=write_access,
    responses={404: {"model": ErrorResponse}},
)
async def update_item(
    item_id: EntityId,
    item_data: ItemCreate,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_item(item_id, item_data)


@items_router.delete(
    "/{item_id}",
    response_model=MessageResponse,
    dependencies=write_access,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_item(
    item_id: EntityId,
    service: CatalogService = Depends(get_catalog_service),
):
    await service.delete_item(item_id)
    return MessageResponse(message="Item deleted successfully.")
