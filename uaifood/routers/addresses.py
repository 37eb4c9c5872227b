"""
Address Endpoints

All routes act on the authenticated user's own address.
"""

from fastapi import APIRouter, Depends

from uaifood.schemas import AddressCreate, AddressResponse, ErrorResponse, MessageResponse
from uaifood.services.access import Action, Principal
from uaifood.services.addresses import AddressService
from uaifood.routers.deps import get_address_service, require

router = APIRouter(prefix="/addresses", tags=["Addresses"])

require_own_address = require(Action.ADDRESS_MANAGE_OWN)


@router.get(
    "/me",
    response_model=AddressResponse,
    responses={404: {"model": ErrorResponse}},
    summary="My Address",
)
async def get_my_address(
    principal: Principal = Depends(require_own_address),
    service: AddressService = Depends(get_address_service),
):
    return await service.get_mine(principal.id)


@router.post(
    "",
    response_model=AddressResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
    summary="Create My Address",
)
async def create_my_address(
    address_data: AddressCreate,
    principal: Principal = Depends(require_own_address),
    service: AddressService = Depends(get_address_service),
):
    return await service.create_mine(principal.id, address_data)


@router.put(
    "",
    response_model=AddressResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Update My Address",
)
async def update_my_address(
    address_data: AddressCreate,
    principal: Principal = Depends(require_own_address),
    service: AddressService = Depends(get_address_service),
):
    return await service.update_mine(principal.id, address_data)


@router.delete(
    "",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete My Address",
)
async def delete_my_address(
    principal: Principal = Depends(require_own_address),
    service: AddressService = Depends(get_address_service),
):
    await service.delete_mine(principal.id)
    return MessageResponse(message="Address removed successfully.")
