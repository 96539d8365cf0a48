"""Proof of Life — open the default shop through a running economy service.

Run with: python scripts/proof_of_life.py
Requires: NATS running and `python -m services.economy` started.
"""

import asyncio
import os
import sys

from vaultmarket import (
    CommandResult,
    EconomyBusClient,
    Envelope,
    MessageType,
    OpenShop,
    Topics,
    create_command,
    validate_message,
)


async def main() -> None:
    nats_url = os.environ.get("NATS_URL", "nats://localhost:4222")
    client = EconomyBusClient(nats_url)

    print("=" * 60)
    print("  VAULT MARKET — Proof of Life")
    print("=" * 60)

    print("[1/3] Connecting to NATS...", end=" ")
    await client.connect()
    print(f"OK ({nats_url})")

    results: list[CommandResult] = []
    done = asyncio.Event()
    command = create_command("proof-of-life", MessageType.OPEN_SHOP, OpenShop())

    async def on_result(env: Envelope) -> None:
        result = CommandResult.model_validate(env.payload)
        if result.reference_msg_id == command.id:
            results.append(result)
            done.set()

    await client.subscribe(Topics.RESULTS, on_result)
    await asyncio.sleep(0.5)

    print("[2/3] Asking the economy service for the default shop...")
    errors = validate_message(command)
    assert not errors, f"Validation failed: {errors}"
    await client.publish(Topics.COMMANDS, command)

    print("[3/3] Waiting for the listing...")
    try:
        await asyncio.wait_for(done.wait(), timeout=5.0)
    except asyncio.TimeoutError:
        print("       Timeout! Is the economy service running?")
        await client.close()
        sys.exit(1)

    result = results[0]
    listing = result.data.get("listing", {})
    print()
    print(f"  Coins: {result.currency}")
    for entry in listing.get("entries", []):
        item = entry["item"]
        rare = " (rare)" if entry["rare"] else ""
        print(f"  - {item['name']}{rare}: {entry['price']} coins, {entry['stock']} in stock")
    if listing.get("notice"):
        print(f"  {listing['notice']}")
    print("=" * 60)

    await client.close()


if __name__ == "__main__":
    asyncio.run(main())
