"""Gasless swap — web3_infra package.

- EIP712Signer: off-thread typed-data signing with the trader's key
- encode_signature: raw 65-byte signature → relayer (v, r, s) shape
"""

from .eip712_signer import EIP712Signer, TypedDataSigner
from .signature_codec import encode_signature

__all__ = [
    "EIP712Signer",
    "TypedDataSigner",
    "encode_signature",
]
