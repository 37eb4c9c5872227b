"""
Demo Data Seeder

Fills an empty database with a small menu, a few clients with addresses
and some orders in different statuses. Orders go through the regular
services, so totals come from the pricing resolver and statuses move
through the normal workflow.

Run from project root: python scripts/seed.py
"""

import argparse
import asyncio
import logging
import os
import random
import sys
from decimal import Decimal

from sqlalchemy import select, func

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from uaifood.core.config import get_settings, setup_logging
from uaifood.database import async_session_maker, engine, init_db
from uaifood.models import Category, Order
from uaifood.schemas import AddressCreate, CategoryCreate, ItemCreate, UserCreate
from uaifood.services.access import Principal
from uaifood.services.addresses import AddressService
from uaifood.services.catalog import CatalogService
from uaifood.services.ordering import OrderService, RequestedLine
from uaifood.services.users import UserService

logger = logging.getLogger("uaifood.seed")

MENU = {
    "Lanches": [
        ("X-Salada", "18.90"),
        ("X-Bacon", "22.50"),
        ("X-Tudo", "27.00"),
        ("Misto Quente", "9.90"),
    ],
    "Bebidas": [
        ("Coca-Cola Lata", "6.50"),
        ("Suco de Laranja", "8.00"),
        ("Água Mineral", "3.50"),
    ],
    "Sobremesas": [
        ("Pudim de Leite", "9.00"),
        ("Brownie", "11.50"),
    ],
    "Promoções": [
        ("Combo X-Salada + Refri", "23.90"),
    ],
}

CLIENTS = [
    ("Ana Souza", "34 98888-1111", "ana@teste.com"),
    ("Bruno Lima", "34 98888-2222", "bruno@teste.com"),
    ("Carla Dias", "34 98888-3333", "carla@teste.com"),
]

STREETS = ["Rua Goiás", "Av. Rondon Pacheco", "Rua Tiradentes", "Av. João Naves"]
DISTRICTS = ["Centro", "Santa Mônica", "Tibery", "Martins"]

DEFAULT_PASSWORD = "senha123"


async def seed_catalog(session) -> list:
    catalog = CatalogService(session)
    items = []
    for category_name, entries in MENU.items():
        category = await catalog.create_category(CategoryCreate(description=category_name))
        for description, price in entries:
            item = await catalog.create_item(
                ItemCreate(
                    description=description,
                    unit_price=Decimal(price),
                    category_id=category.id,
                )
            )
            items.append(item)
    logger.info(f"Catalog: {len(MENU)} categories, {len(items)} items")
    return items


async def seed_clients(session) -> list:
    users = UserService(session)
    addresses = AddressService(session)
    clients = []
    for index, (name, phone, email) in enumerate(CLIENTS):
        user = await users.register(
            UserCreate(name=name, phone=phone, email=email, password=DEFAULT_PASSWORD)
        )
        await addresses.create_mine(
            user.id,
            AddressCreate(
                street=STREETS[index % len(STREETS)],
                number=str(random.randint(10, 999)),
                district=DISTRICTS[index % len(DISTRICTS)],
                city="Uberlândia",
                state="MG",
                zip_code=f"384{random.randint(0, 99999):05d}",
            ),
        )
        clients.append(user)
    logger.info(f"Clients: {len(clients)} (password '{DEFAULT_PASSWORD}')")
    return clients


async def seed_orders(session, clients, items, orders_per_client: int) -> None:
    settings = get_settings()
    admin = await UserService(session).ensure_admin(settings)
    admin_principal = Principal(id=admin.id, role=admin.role)
    service = OrderService(session)

    created = 0
    for client in clients:
        for _ in range(orders_per_client):
            picked = random.sample(items, k=random.randint(1, 3))
            order = await service.create(
                client_id=client.id,
                payment_method=random.choice(["CASH", "DEBIT", "CREDIT", "PIX"]),
                requested_lines=[
                    RequestedLine(item_id=item.id, quantity=random.randint(1, 3))
                    for item in picked
                ],
            )
            for _ in range(random.randint(0, 3)):
                order = await service.advance_status(order.id, admin_principal)
            created += 1
            logger.info(f"  Order #{order.id}: {order.total} [{order.status.value}]")
    logger.info(f"Orders: {created}")


async def seed(orders_per_client: int) -> int:
    await init_db()

    async with async_session_maker() as session:
        existing = await session.scalar(select(func.count(Category.id)))
        if existing:
            logger.warning("Catalog already has data; seed an empty database")
            return 1

        items = await seed_catalog(session)
        clients = await seed_clients(session)
        await seed_orders(session, clients, items, orders_per_client)

        total_orders = await session.scalar(select(func.count(Order.id)))
        logger.info(f"Done. Database now holds {total_orders} order(s)")

    await engine.dispose()
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the database with demo data")
    parser.add_argument("--orders", type=int, default=2, help="Orders per client")
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(seed(args.orders)))
