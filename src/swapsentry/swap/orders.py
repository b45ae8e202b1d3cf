"""EIP-712 payload for gasless swap orders."""

from typing import Any

from swapsentry.swap.models import SwapQuote

DOMAIN_NAME = "SwapSentry"
DOMAIN_VERSION = "1"

SWAP_ORDER_TYPE = [
    {"name": "quoteId", "type": "string"},
    {"name": "owner", "type": "address"},
    {"name": "inputAsset", "type": "string"},
    {"name": "outputAsset", "type": "string"},
    {"name": "inputAmount", "type": "uint256"},
    {"name": "minOutputAmount", "type": "uint256"},
    {"name": "feeBasisPoints", "type": "uint16"},
    {"name": "feeRecipient", "type": "address"},
    {"name": "expiresAt", "type": "uint256"},
]


def build_order_typed_data(quote: SwapQuote, owner_address: str) -> dict[str, Any]:
    """Build the EIP-712 full message the user's wallet signs for a quote.

    Args:
        quote: Quote being executed
        owner_address: Address of the signing account

    Returns:
        Full message dict (types, primaryType, domain, message)
    """
    domain_type = [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
        {"name": "chainId", "type": "uint256"},
    ]
    domain: dict[str, Any] = {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": quote.chain_id,
    }
    if quote.router_address:
        domain_type.append({"name": "verifyingContract", "type": "address"})
        domain["verifyingContract"] = quote.router_address

    return {
        "types": {
            "EIP712Domain": domain_type,
            "SwapOrder": SWAP_ORDER_TYPE,
        },
        "primaryType": "SwapOrder",
        "domain": domain,
        "message": {
            "quoteId": quote.quote_id,
            "owner": owner_address,
            "inputAsset": quote.input_asset,
            "outputAsset": quote.output_asset,
            "inputAmount": quote.input_amount,
            "minOutputAmount": quote.min_output_amount,
            "feeBasisPoints": quote.fee_basis_points,
            "feeRecipient": quote.fee_recipient,
            "expiresAt": int(quote.expires_at),
        },
    }
