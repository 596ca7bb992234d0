#!/usr/bin/env python3
"""
Sign a payment on a node and submit it.
"""
import json
import logging
import os

from ripple_sdk import NodeEndpoints, RippleClient, RippleError, TransactionRequest, TransactionType


def payment(tx: TransactionRequest) -> TransactionRequest:
    return (
        tx.set_amount("0.004")
        .set_destination_tag(1)
        .set_destination(os.environ["RIPPLE_DESTINATION"])
        .set_transaction_type(TransactionType.PAYMENT)
    )


def main():
    logging.basicConfig(level=logging.INFO)

    address = os.environ.get("RIPPLE_ADDRESS")
    secret = os.environ.get("RIPPLE_SECRET")
    if not address or not secret or not os.environ.get("RIPPLE_DESTINATION"):
        print("ERROR: RIPPLE_ADDRESS, RIPPLE_SECRET and RIPPLE_DESTINATION are required")
        return

    # The public mainnet nodes refuse to sign; point at your own rippled or the testnet.
    endpoints = NodeEndpoints(rpc_url=os.environ.get("RIPPLE_RPC_URL", "http://localhost:5005"))

    with RippleClient(address, secret, endpoints) as ripple:
        try:
            result = ripple.build_transaction(payment).submit()
        except RippleError as e:
            print(f"Payment failed: {e}")
            return

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
