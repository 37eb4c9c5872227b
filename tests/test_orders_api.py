from decimal import Decimal

import pytest
from sqlalchemy import func, select

from uaifood.core.errors import ConflictError
from uaifood.models import MAX_ID, Order, OrderLine, OrderStatus
from uaifood.services.access import Principal
from uaifood.services.ordering import INITIAL_STATUS, OrderRepository, OrderService, RequestedLine
from uaifood.services.ordering.pricing import MAX_QUANTITY


def order_payload(menu, burgers=2, sodas=1, method="PIX"):
    items = [{"itemId": menu["burger"].id, "quantity": burgers}]
    if sodas:
        items.append({"itemId": menu["soda"].id, "quantity": sodas})
    return {"paymentMethod": method, "items": items}


async def place_order(client, headers, menu, **kwargs):
    response = await client.post("/orders", json=order_payload(menu, **kwargs), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def count_rows(session_maker, model):
    async with session_maker() as session:
        return await session.scalar(select(func.count(model.id)))


# =============================================================================
# CHECKOUT
# =============================================================================

async def test_place_order_computes_total_server_side(client, customer, customer_headers, menu):
    body = await place_order(client, customer_headers, menu)

    assert body["status"] == "pending"
    assert body["clientId"] == customer.id
    assert body["paymentMethod"] == "PIX"
    assert Decimal(body["total"]) == Decimal("44.30")
    assert [(line["itemId"], line["quantity"]) for line in body["lines"]] == [
        (menu["burger"].id, 2),
        (menu["soda"].id, 1),
    ]


async def test_client_supplied_prices_are_ignored(client, customer_headers, menu):
    payload = order_payload(menu)
    payload["total"] = "1.00"
    for line in payload["items"]:
        line["unitPrice"] = "0.01"

    response = await client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 201
    assert Decimal(response.json()["total"]) == Decimal("44.30")


async def test_empty_order_is_rejected_and_not_stored(client, customer_headers, session_maker):
    response = await client.post(
        "/orders", json={"paymentMethod": "PIX", "items": []}, headers=customer_headers
    )

    assert response.status_code == 400
    assert "message" in response.json()
    assert await count_rows(session_maker, Order) == 0


@pytest.mark.parametrize("quantity", [0, -3])
async def test_non_positive_quantity_is_rejected(client, customer_headers, menu, quantity, session_maker):
    payload = {"paymentMethod": "PIX", "items": [{"itemId": menu["burger"].id, "quantity": quantity}]}

    response = await client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 400
    assert await count_rows(session_maker, Order) == 0


async def test_unknown_payment_method_is_rejected(client, customer_headers, menu):
    response = await client.post(
        "/orders", json=order_payload(menu, method="BITCOIN"), headers=customer_headers
    )

    assert response.status_code == 400


async def test_unknown_item_is_not_found_and_nothing_is_stored(
    client, customer_headers, menu, session_maker
):
    payload = order_payload(menu)
    payload["items"].append({"itemId": 999, "quantity": 1})

    response = await client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 404
    assert await count_rows(session_maker, Order) == 0
    assert await count_rows(session_maker, OrderLine) == 0


async def test_total_does_not_follow_later_price_changes(
    client, customer_headers, admin_headers, menu
):
    body = await place_order(client, customer_headers, menu)

    response = await client.put(
        f"/items/{menu['burger'].id}",
        json={
            "description": "X-Salada",
            "unitPrice": "25.00",
            "categoryId": menu["snacks"].id,
        },
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = await client.get(f"/orders/my/{body['id']}", headers=customer_headers)
    assert Decimal(response.json()["total"]) == Decimal("44.30")


# =============================================================================
# READING ORDERS
# =============================================================================

async def test_client_sees_only_own_orders_newest_first(
    client, customer_headers, other_customer_headers, menu
):
    first = await place_order(client, customer_headers, menu)
    second = await place_order(client, customer_headers, menu, burgers=1, sodas=0)
    await place_order(client, other_customer_headers, menu)

    response = await client.get("/orders/my", headers=customer_headers)

    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == [second["id"], first["id"]]


async def test_client_cannot_read_someone_elses_order(
    client, customer_headers, other_customer_headers, menu
):
    body = await place_order(client, customer_headers, menu)

    response = await client.get(f"/orders/my/{body['id']}", headers=other_customer_headers)

    assert response.status_code == 403


async def test_missing_order_is_not_found(client, customer_headers, admin_headers):
    assert (await client.get("/orders/my/404", headers=customer_headers)).status_code == 404
    assert (await client.get("/orders/details/404", headers=admin_headers)).status_code == 404
    assert (await client.patch("/orders/status/404", headers=admin_headers)).status_code == 404


async def test_admin_lists_all_orders_with_client_info(
    client, customer, customer_headers, other_customer_headers, admin_headers, menu
):
    await place_order(client, customer_headers, menu)
    await place_order(client, other_customer_headers, menu)

    response = await client.get("/orders", headers=admin_headers)
    assert response.status_code == 200
    orders = response.json()
    assert len(orders) == 2
    assert all(o["client"]["email"] for o in orders)

    response = await client.get(f"/orders/client/{customer.id}", headers=admin_headers)
    assert [o["clientId"] for o in response.json()] == [customer.id]


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/orders"),
        ("get", "/orders/client/1"),
        ("get", "/orders/details/1"),
        ("patch", "/orders/status/1"),
    ],
)
async def test_admin_routes_reject_clients(client, customer_headers, method, path):
    response = await getattr(client, method)(path, headers=customer_headers)

    assert response.status_code == 403


async def test_admin_cannot_place_orders(client, admin_headers, menu):
    response = await client.post("/orders", json=order_payload(menu), headers=admin_headers)

    assert response.status_code == 403


@pytest.mark.parametrize(
    "method, path",
    [("get", "/orders/my"), ("get", "/orders"), ("patch", "/orders/status/1")],
)
async def test_missing_token_is_unauthenticated(client, method, path):
    response = await getattr(client, method)(path)

    assert response.status_code == 401
    assert response.json() == {"message": "Token not provided."}


async def test_garbage_token_is_unauthenticated(client):
    response = await client.get("/orders/my", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


# =============================================================================
# STATUS WORKFLOW
# =============================================================================

async def test_admin_advances_order_one_step_at_a_time(
    client, customer_headers, admin_headers, menu
):
    order = await place_order(client, customer_headers, menu)
    path = f"/orders/status/{order['id']}"

    seen = []
    for _ in range(3):
        response = await client.patch(path, headers=admin_headers)
        assert response.status_code == 200
        seen.append(response.json()["status"])

    assert seen == ["preparing", "delivering", "delivered"]

    response = await client.patch(path, headers=admin_headers)
    assert response.status_code == 400
    assert "delivered" in response.json()["message"]

    response = await client.get(f"/orders/my/{order['id']}", headers=customer_headers)
    assert response.json()["status"] == "delivered"


async def test_explicit_target_must_be_next_status(client, customer_headers, admin_headers, menu):
    order = await place_order(client, customer_headers, menu)
    path = f"/orders/status/{order['id']}"

    response = await client.patch(path, json={"status": "delivered"}, headers=admin_headers)
    assert response.status_code == 400

    response = await client.patch(path, json={"status": "preparing"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "preparing"

    response = await client.patch(path, json={"status": "pending"}, headers=admin_headers)
    assert response.status_code == 400

    response = await client.get(f"/orders/details/{order['id']}", headers=admin_headers)
    assert response.json()["status"] == "preparing"


async def test_new_orders_start_in_initial_status(session, customer, menu):
    order = await OrderService(session).create(
        customer.id, "PIX", [RequestedLine(menu["soda"].id, 1)]
    )

    assert order.status is INITIAL_STATUS


async def test_conditional_status_update_only_applies_once(session, customer, menu):
    service = OrderService(session)
    order = await service.create(customer.id, "CASH", [RequestedLine(menu["burger"].id, 1)])
    repository = OrderRepository(session)

    assert await repository.update_order_status(order.id, OrderStatus.PENDING, OrderStatus.PREPARING)
    assert not await repository.update_order_status(order.id, OrderStatus.PENDING, OrderStatus.PREPARING)


async def test_lost_race_surfaces_conflict_error(session, admin, customer, menu):
    class RacingRepository(OrderRepository):
        async def update_order_status(self, order_id, from_status, to_status):
            return False

    service = OrderService(session)
    order = await service.create(customer.id, "DEBIT", [RequestedLine(menu["soda"].id, 2)])

    racing = OrderService(session, repository=RacingRepository(session))
    with pytest.raises(ConflictError):
        await racing.advance_status(order.id, Principal(id=admin.id, role=admin.role))

    refreshed = await service.get(order.id)
    assert refreshed.status is OrderStatus.PENDING
    assert refreshed.total == Decimal("13.00")


# =============================================================================
# OUT-OF-RANGE NUMBERS
# =============================================================================

@pytest.mark.parametrize("quantity", [10**30, MAX_QUANTITY + 1])
async def test_oversized_quantity_is_rejected(client, customer_headers, menu, quantity, session_maker):
    payload = {"paymentMethod": "PIX", "items": [{"itemId": menu["burger"].id, "quantity": quantity}]}

    response = await client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 400
    assert "quantity" in response.json()["message"]
    assert await count_rows(session_maker, Order) == 0


@pytest.mark.parametrize("item_id", [10**20, MAX_ID + 1, 0])
async def test_out_of_range_item_id_is_rejected(client, customer_headers, item_id):
    payload = {"paymentMethod": "PIX", "items": [{"itemId": item_id, "quantity": 1}]}

    response = await client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 400
    assert "itemId" in response.json()["message"]


@pytest.mark.parametrize("path", [f"/orders/my/{10**20}", f"/orders/my/{MAX_ID + 1}", "/orders/my/0"])
async def test_out_of_range_own_order_id_is_rejected(client, customer_headers, path):
    response = await client.get(path, headers=customer_headers)

    assert response.status_code == 400


@pytest.mark.parametrize("path", [f"/orders/details/{MAX_ID + 1}", f"/orders/client/{10**20}"])
async def test_out_of_range_admin_path_id_is_rejected(client, admin_headers, path):
    response = await client.get(path, headers=admin_headers)

    assert response.status_code == 400


async def test_out_of_range_status_advance_is_rejected(client, admin_headers):
    response = await client.patch(f"/orders/status/{10**20}", headers=admin_headers)

    assert response.status_code == 400


async def test_largest_quantity_is_accepted(client, customer_headers, menu):
    body = await place_order(
        client, customer_headers, menu, burgers=MAX_QUANTITY, sodas=0
    )

    assert Decimal(body["total"]) == Decimal("18900.00")
