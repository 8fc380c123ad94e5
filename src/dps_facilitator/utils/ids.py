"""
Identifier generation for invoices and quotes.

Identifiers are 16 random bytes rendered as hex strings with a '0x' prefix,
the same shape x402 uses for payment ids.
"""

import secrets


def generate_invoice_id() -> str:
    """
    Generate a random invoice ID in hex format.

    Returns:
        A 16-byte ID as a hex string with '0x' prefix.
        Example: "0x1234567890abcdef1234567890abcdef"
    """
    return "0x" + secrets.token_hex(16)


def generate_quote_id() -> str:
    """Generate a random dynamic quote ID, same format as invoice IDs"""
    return "0x" + secrets.token_hex(16)
