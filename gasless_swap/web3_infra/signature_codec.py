"""Split a recoverable ECDSA signature into the relayer's wire format."""

from __future__ import annotations

from gasless_swap.core.errors import MalformedSignature
from gasless_swap.models.signature import Signature, SignatureType

SIGNATURE_LENGTH = 65


def _to_bytes(raw: str | bytes) -> bytes:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw)
    if not isinstance(raw, str):
        raise MalformedSignature(f"unsupported signature type: {type(raw).__name__}")
    text = raw[2:] if raw[:2].lower() == "0x" else raw
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise MalformedSignature(f"signature is not hex: {raw!r}") from exc


def encode_signature(raw: str | bytes) -> Signature:
    """Decompose ``r || s || v`` and tag it as an EIP-712 signature.

    A recovery id of 0/1 is lifted to 27/28.
    """
    data = _to_bytes(raw)
    if len(data) != SIGNATURE_LENGTH:
        raise MalformedSignature(
            f"expected {SIGNATURE_LENGTH} bytes, got {len(data)}"
        )

    v = data[64]
    if v in (0, 1):
        v += 27
    elif v not in (27, 28):
        raise MalformedSignature(f"invalid recovery byte: {v}")

    return Signature(
        v=v,
        r="0x" + data[0:32].hex(),
        s="0x" + data[32:64].hex(),
        signature_type=SignatureType.EIP712,
    )
