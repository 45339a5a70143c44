"""
Avalanche Fuji payment example.

Sends a request carrying an x402 ``X-PAYMENT`` header produced by a signer
that emits yParity (0/1) or EIP-155 recovery ids.  The client rewrites the
signature to the legacy 27/28 form expected on Fuji before sending.

Setup:
    pip install manowar-pay

Usage:
    export X402_RESOURCE_URL="https://api.example.com/agents/run"
    export X402_PAYMENT_HEADER="eyJ4NDAyVmVyc2lvbiI6..."
    python fuji_payment_example.py
"""

import asyncio
import logging
import os

from manowar_pay import create_normalized_http_client
from manowar_pay.x402.http import NORMALIZATION_EXTENSION


async def main():
    url = os.environ.get("X402_RESOURCE_URL")
    payment_header = os.environ.get("X402_PAYMENT_HEADER")
    if not url or not payment_header:
        print("Please set X402_RESOURCE_URL and X402_PAYMENT_HEADER")
        return

    logging.basicConfig(level=logging.DEBUG)

    async with create_normalized_http_client(chain_id="eip155:43113") as client:
        response = await client.get(url, headers={"x-payment": payment_header})

    outcome = response.request.extensions.get(NORMALIZATION_EXTENSION)
    print(f"Normalization: {outcome}")
    print(f"Status: {response.status_code}")
    print(response.text[:500])


if __name__ == "__main__":
    asyncio.run(main())
