"""
Order Endpoints

    POST  /orders                    CLIENT  place an order
    GET   /orders/my                 CLIENT  own orders, newest first
    GET   /orders/my/{id}            CLIENT  one own order
    GET   /orders                    ADMIN   every order with client info
    GET   /orders/client/{clientId}  ADMIN   orders of one client
    GET   /orders/details/{id}       ADMIN   one order
    PATCH /orders/status/{id}        ADMIN   advance status one step
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from uaifood.schemas import (
    AdminOrderResponse,
    ErrorResponse,
    OrderCreate,
    OrderResponse,
    OrderStatusAdvance,
)
from uaifood.services.access import Action, Principal
from uaifood.services.ordering import OrderService, RequestedLine
from uaifood.routers.deps import EntityId, get_order_service, require

router = APIRouter(prefix="/orders", tags=["Orders"])


# =============================================================================
# CLIENT
# =============================================================================

@router.post(
    "",
    response_model=OrderResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Place Order",
)
async def create_order(
    order_data: OrderCreate,
    principal: Principal = Depends(require(Action.ORDER_CREATE)),
    service: OrderService = Depends(get_order_service),
):
    """
    Create an order for the authenticated client.

    Prices are resolved from the catalog; the total is never taken from
    the request. The order starts in ``pending``.
    """
    return await service.create(
        client_id=principal.id,
        payment_method=order_data.payment_method,
        requested_lines=[
            RequestedLine(item_id=line.item_id, quantity=line.quantity)
            for line in order_data.items
        ],
    )


@router.get("/my", response_model=List[OrderResponse], summary="My Orders")
async def get_my_orders(
    principal: Principal = Depends(require(Action.ORDER_LIST_OWN)),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_for_client(principal.id)


@router.get(
    "/my/{order_id}",
    response_model=OrderResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="My Order by ID",
)
async def get_my_order(
    order_id: EntityId,
    principal: Principal = Depends(require(Action.ORDER_VIEW_OWN)),
    service: OrderService = Depends(get_order_service),
):
    return await service.get_for_client(order_id, principal.id)


# =============================================================================
# ADMIN
# =============================================================================

@router.get(
    "",
    response_model=List[AdminOrderResponse],
    dependencies=[Depends(require(Action.ORDER_LIST_ALL))],
    summary="List All Orders",
)
async def list_orders(service: OrderService = Depends(get_order_service)):
    return await service.list_all()


@router.get(
    "/client/{client_id}",
    response_model=List[AdminOrderResponse],
    dependencies=[Depends(require(Action.ORDER_LIST_BY_CLIENT))],
    summary="List Orders of a Client",
)
async def list_orders_by_client(
    client_id: EntityId,
    service: OrderService = Depends(get_order_service),
):
    return await service.list_for_client(client_id)


@router.get(
    "/details/{order_id}",
    response_model=AdminOrderResponse,
    dependencies=[Depends(require(Action.ORDER_VIEW_ANY))],
    responses={404: {"model": ErrorResponse}},
    summary="Order Details",
)
async def get_order_details(
    order_id: EntityId,
    service: OrderService = Depends(get_order_service),
):
    return await service.get(order_id)


@router.patch(
    "/status/{order_id}",
    response_model=AdminOrderResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Advance Order Status",
)
async def advance_order_status(
    order_id: EntityId,
    body: Optional[OrderStatusAdvance] = Body(None),
    principal: Principal = Depends(require(Action.ORDER_ADVANCE)),
    service: OrderService = Depends(get_order_service),
):
    """
    Move the order to its next status:
    pending → preparing → delivering → delivered.

    The body is optional; if it names a status, that status must be the
    immediate next one.
    """
    requested = body.status if body is not None else None
    return await service.advance_status(order_id, principal, requested)
