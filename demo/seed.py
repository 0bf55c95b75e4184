#!/usr/bin/env python3
"""
Demo seed script — fills the simulator's history with sample transfers.

!! NOT FOR PRODUCTION !!
The simulator moves no real money, but this script still debits the
simulated balance. Use it for local demos and frontend development.

Usage:
    # With the API server running on localhost:8000:
    python demo/seed.py

    # Delete both saved snapshots (restart the server to start from the seed balance):
    python demo/seed.py --reset

    # Custom server URL and number of transfers:
    python demo/seed.py --base-url http://localhost:9000 --count 20
"""

import argparse
import asyncio
import os
import random

import httpx

BASE_URL = "http://localhost:8000"

# ---------------------------------------------------------------------------
# Demo recipients
# ---------------------------------------------------------------------------

RECIPIENTS = [
    {"name": "Bat-Erdene Dorj", "account": "MN12 0005 00 5001234567"},
    {"name": "Saruul Ganbold", "account": "MN34 0004 00 4009876543"},
    {"name": "Tuvshin Enkh", "account": "MN56 0015 00 1502468135"},
    {"name": "Nomin Bold", "account": "MN78 0005 00 5007654321"},
]

DESCRIPTIONS = [
    "Lunch", "Rent", "Groceries", "Taxi", "Phone bill",
    "Internet bill", "Gift", "Tuition", "Coffee", "",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


async def transfer(client: httpx.AsyncClient, amount: str, recipient: dict, description: str) -> dict:
    resp = await client.post(
        f"{BASE_URL}/transfers",
        json={
            "amount": amount,
            "recipient_name": recipient["name"],
            "recipient_account": recipient["account"],
            "description": description,
        },
    )
    return resp.json()


async def get_balance(client: httpx.AsyncClient) -> str:
    resp = await client.get(f"{BASE_URL}/balance")
    resp.raise_for_status()
    return resp.json()["formatted_balance"]


# ---------------------------------------------------------------------------
# Seed logic
# ---------------------------------------------------------------------------

async def seed(base_url: str, count: int) -> None:
    global BASE_URL
    BASE_URL = base_url.rstrip("/")

    async with httpx.AsyncClient(timeout=30.0) as client:
        print(f"\nStarting balance: {await get_balance(client)}")
        print(f"\nSending {count} transfers...")

        for _ in range(count):
            recipient = random.choice(RECIPIENTS)
            amount = f"{random.randint(5_000, 2_500_000):,}.00"
            result = await transfer(client, amount, recipient, random.choice(DESCRIPTIONS))

            if "error_type" in result:
                log(f"Rejected ({result['error_type']}): {result['detail']}")
                break
            log(f"{result['formatted_amount']:>20s} -> {result['transaction']['recipientName']}")

        history = (await client.get(f"{BASE_URL}/transactions/history")).json()
        final_balance = await get_balance(client)

    print(f"\nFinal balance: {final_balance}")
    print(f"History: {sum(len(g['transactions']) for g in history)} transfers over {len(history)} day(s)\n")


def reset_storage() -> None:
    """Delete the saved snapshots so the server starts from the seed balance."""
    root = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))
    paths = [
        os.path.join(root, "bank_sim.db"),
        os.path.join(root, "data", "local_storage", "khan-bank-data.json"),
    ]

    for path in paths:
        if os.path.exists(path):
            os.remove(path)
            print(f"\n  Deleted {path}")
        else:
            print(f"\n  Nothing at {path}")
    print("  Restart the server to start from the seed balance.\n")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Demo seed script — NOT FOR PRODUCTION",
        epilog="Sends sample transfers to a running simulator.",
    )
    parser.add_argument(
        "--base-url", default="http://localhost:8000",
        help="Base URL of the running API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--count", type=int, default=12,
        help="Number of transfers to send (default: 12)",
    )
    parser.add_argument(
        "--reset", action="store_true",
        help="Delete the saved snapshots and exit (restart server to re-seed)",
    )
    args = parser.parse_args()

    if args.reset:
        reset_storage()
        return

    await seed(args.base_url, args.count)


if __name__ == "__main__":
    asyncio.run(main())
