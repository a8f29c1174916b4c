"""Shared type definitions for pool records and instruction payloads.

Account identifiers are 32 raw bytes. At the edges (configuration, the
simulator service, logs) they are written as base58 strings, so the
Pubkey type accepts either form and always stores bytes.
"""

from typing import Annotated, Any

import base58
from pydantic import BeforeValidator, Field, PlainSerializer

from cpamm.constants import I64_MAX, I64_MIN, PUBKEY_LENGTH, U8_MAX, U16_MAX, U64_MAX


def decode_pubkey(value: Any) -> bytes:
    """Validate and decode a 32-byte account identifier.

    Args:
        value: Raw bytes, or a base58 string

    Returns:
        The identifier as 32 raw bytes

    Raises:
        ValueError: If the value is not a valid 32-byte identifier
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        try:
            raw = base58.b58decode(value)
        except ValueError as err:
            raise ValueError(f"Pubkey must be base58: '{value}'") from err
    else:
        raise ValueError(f"Pubkey must be bytes or base58 string, got {type(value).__name__}")

    if len(raw) != PUBKEY_LENGTH:
        raise ValueError(f"Pubkey must be {PUBKEY_LENGTH} bytes, got {len(raw)}")
    return raw


def encode_pubkey(value: bytes) -> str:
    """Render a 32-byte identifier as base58."""
    return base58.b58encode(value).decode("ascii")


# 32-byte account identifier (accepts base58 on input, emits base58 in JSON)
Pubkey = Annotated[
    bytes,
    BeforeValidator(decode_pubkey),
    PlainSerializer(encode_pubkey, return_type=str, when_used="json"),
]

U8 = Annotated[int, Field(ge=0, le=U8_MAX)]
U16 = Annotated[int, Field(ge=0, le=U16_MAX)]
U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
I64 = Annotated[int, Field(ge=I64_MIN, le=I64_MAX)]
