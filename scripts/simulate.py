"""
Checkout Simulation Script

Fires many concurrent checkouts at a running server, then lets the
administrator advance every new order through the workflow. Useful to
check that totals stay server-computed and that concurrent status
changes never skip a step.

Run from project root: python scripts/simulate.py
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from decimal import Decimal
from typing import Any

import httpx

if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

API_BASE_URL = "http://localhost:3000"
TOTAL_ORDERS = 50
CLIENT_COUNT = 5

ADMIN_EMAIL = "admin@uaifood.com"
ADMIN_PASSWORD = "admin123"

FIRST_NAMES = ["Ana", "Bruno", "Carla", "Diego", "Elisa", "Fábio", "Gabi", "Hugo"]
LAST_NAMES = ["Souza", "Lima", "Dias", "Costa", "Rocha", "Alves", "Melo"]
PAYMENT_METHODS = ["CASH", "DEBIT", "CREDIT", "PIX"]


def generate_random_client() -> dict[str, str]:
    """Registration payload with a unique e-mail."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    tag = f"{int(time.time() * 1000) % 10_000_000}{random.randint(100, 999)}"
    return {
        "name": f"{first} {last}",
        "phone": f"34 9{random.randint(1000, 9999)}-{random.randint(1000, 9999)}",
        "email": f"sim.{first.lower()}.{tag}@teste.com",
        "password": "senha123",
    }


def generate_random_lines(menu: list[dict]) -> list[dict]:
    """
    Random order lines. A bogus ``unitPrice`` is attached on purpose;
    the server must ignore it.
    """
    picked = random.sample(menu, k=min(len(menu), random.randint(1, 4)))
    return [
        {"itemId": item["id"], "quantity": random.randint(1, 3), "unitPrice": "0.01"}
        for item in picked
    ]


def expected_total(menu: list[dict], lines: list[dict]) -> Decimal:
    prices = {item["id"]: Decimal(item["unitPrice"]) for item in menu}
    return sum(
        (prices[line["itemId"]] * line["quantity"] for line in lines),
        Decimal("0.00"),
    )


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# SETUP
# =============================================================================

async def login(client: httpx.AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        f"{API_BASE_URL}/users/login",
        json={"email": email, "password": password},
    )
    response.raise_for_status()
    return response.json()["token"]


async def create_client_session(client: httpx.AsyncClient) -> str:
    payload = generate_random_client()
    response = await client.post(f"{API_BASE_URL}/users/register", json=payload)
    response.raise_for_status()
    return await login(client, payload["email"], payload["password"])


async def fetch_menu(client: httpx.AsyncClient, token: str) -> list[dict]:
    response = await client.get(f"{API_BASE_URL}/items", headers=auth(token))
    response.raise_for_status()
    return response.json()


# =============================================================================
# CHECKOUT
# =============================================================================

async def send_order(
    client: httpx.AsyncClient,
    order_num: int,
    token: str,
    menu: list[dict],
) -> dict[str, Any]:
    """Place one order and compare the returned total with the menu prices."""
    lines = generate_random_lines(menu)
    payload = {"paymentMethod": random.choice(PAYMENT_METHODS), "items": lines}
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/orders",
            json=payload,
            headers=auth(token),
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            data = response.json()
            total = Decimal(data["total"])
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data["id"],
                "total": total,
                "total_ok": total == expected_total(menu, lines),
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": f"{response.status_code} {response.text[:100]}",
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


async def advance_until_delivered(
    client: httpx.AsyncClient,
    admin_token: str,
    order_id: int,
) -> list[str]:
    """
    Advance one order until the server refuses; returns the statuses seen.
    Two concurrent advances are fired per step to exercise the conflict path.
    """
    seen = ["pending"]
    url = f"{API_BASE_URL}/orders/status/{order_id}"
    while True:
        responses = await asyncio.gather(
            client.patch(url, headers=auth(admin_token)),
            client.patch(url, headers=auth(admin_token)),
        )
        accepted = [r for r in responses if r.status_code == 200]
        if not accepted:
            break
        seen.extend(r.json()["status"] for r in accepted)
    return seen


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_orders: int = TOTAL_ORDERS, advance: bool = True) -> dict[str, Any]:
    print("=" * 70)
    print("CHECKOUT SIMULATION - HIGH CONCURRENCY TEST")
    print("=" * 70)
    print(f"Total Orders: {num_orders}")
    print(f"Target: {API_BASE_URL}")
    print(f"Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(timeout=30.0) as client:
        admin_token = await login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        tokens = await asyncio.gather(
            *(create_client_session(client) for _ in range(CLIENT_COUNT))
        )
        menu = await fetch_menu(client, tokens[0])
        if not menu:
            print("\nThe menu is empty. Run scripts/seed.py first.")
            return {"total": num_orders, "successful": 0, "failed": num_orders}

        print(f"\nFiring {num_orders} orders from {len(tokens)} clients...\n")
        results = await asyncio.gather(*(
            send_order(client, i + 1, tokens[i % len(tokens)], menu)
            for i in range(num_orders)
        ))

        successful = [r for r in results if r["success"]]
        progressions = []
        if advance and successful:
            print("Advancing every order (two concurrent admins per step)...\n")
            progressions = await asyncio.gather(*(
                advance_until_delivered(client, admin_token, r["order_id"])
                for r in successful
            ))

    total_time = round(time.time() - start_time, 2)
    failed = [r for r in results if not r["success"]]
    wrong_totals = [r for r in successful if not r["total_ok"]]
    full_cycle = ["pending", "preparing", "delivering", "delivered"]
    broken_cycles = [p for p in progressions if p != full_cycle]

    print("=" * 70)
    print("SIMULATION RESULTS")
    print("=" * 70)
    print(f"\nSuccessful Orders: {len(successful)}/{num_orders}")
    print(f"Failed Orders: {len(failed)}/{num_orders}")
    print(f"Totals differing from menu prices: {len(wrong_totals)}")
    if progressions:
        print(f"Orders with a broken status progression: {len(broken_cycles)}")
    print(f"Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        revenue = sum((r["total"] for r in successful), Decimal("0.00"))
        print("\nPerformance Metrics:")
        print(f"   Average Response: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   Total Revenue: R$ {revenue}")

    if failed:
        print("\nFailed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "wrong_totals": len(wrong_totals),
        "broken_cycles": len(broken_cycles),
        "total_time": total_time,
    }


async def check_health() -> bool:
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health")
        except httpx.HTTPError as e:
            print(f"Server unreachable: {e}")
            return False
    if response.status_code != 200:
        print(f"Health check failed: {response.text}")
        return False
    data = response.json()
    print(f"Status: {data.get('status')} | Database: {data.get('database')} "
          f"| Token blacklist: {data.get('token_blacklist')}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Checkout Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    parser.add_argument("--no-advance", action="store_true", help="Only place orders")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    if not asyncio.run(check_health()):
        sys.exit(1)

    summary = asyncio.run(run_simulation(args.orders, advance=not args.no_advance))
    sys.exit(0 if summary["failed"] == 0 and summary.get("wrong_totals", 0) == 0 else 1)
