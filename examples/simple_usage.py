#!/usr/bin/env python3
"""
Simple example of using the trontx SDK.
"""
import json
import logging
import os

from trontx_sdk import TronClient, TronTxError


def main():
    """
    Demonstrate basic usage of the TronClient.

    This example shows how to:
    1. Initialize the client against a network
    2. Build an unsigned TRX transfer and wait on the Future
    3. Build a contract call using the callback convention
    """
    logging.basicConfig(level=logging.INFO)

    # Read configuration from environment
    NETWORK = os.environ.get("TRON_NETWORK", "shasta")
    OWNER_ADDRESS = os.environ.get("OWNER_ADDRESS")
    RECIPIENT_ADDRESS = os.environ.get("RECIPIENT_ADDRESS")
    TOKEN_CONTRACT = os.environ.get("TOKEN_CONTRACT")
    API_KEY = os.environ.get("TRONGRID_API_KEY")

    # Verify configuration
    if not OWNER_ADDRESS or not RECIPIENT_ADDRESS:
        print("ERROR: OWNER_ADDRESS and RECIPIENT_ADDRESS environment variables are required")
        return

    with TronClient(network=NETWORK, default_address=OWNER_ADDRESS, api_key=API_KEY) as client:
        builder = client.transaction_builder

        try:
            tx = builder.send_trx(RECIPIENT_ADDRESS, 1_000_000).result(timeout=30)
            print("Unsigned transfer built:")
            print(json.dumps(tx, indent=2))
        except TronTxError as e:
            print(f"Error building transfer ({e.__class__.__name__}): {e}")

        if not TOKEN_CONTRACT:
            return

        def on_built(error, result):
            if error is not None:
                print(f"Error building contract call: {error}")
            else:
                print(f"Unsigned contract call built: {result['transaction']['txID']}")

        builder.trigger_smart_contract(
            TOKEN_CONTRACT,
            "transfer(address,uint256)",
            fee_limit=10_000_000,
            parameters=[
                {"type": "address", "value": RECIPIENT_ADDRESS},
                {"type": "uint256", "value": 100}
            ],
            callback=on_built
        )


if __name__ == "__main__":
    main()
