"""EIP712Signer — off-main-thread EIP-712 signing for the gasless pipeline.

Signing is CPU-bound (elliptic-curve math), so we offload it to a
``ProcessPoolExecutor`` to avoid blocking the asyncio event loop.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Protocol, runtime_checkable

import structlog
from web3 import Account

from gasless_swap.core.errors import SigningFailure

logger = structlog.get_logger("web3_infra.eip712_signer")


@runtime_checkable
class TypedDataSigner(Protocol):
    """Anything that can sign an EIP-712 ``{domain, types, primaryType, message}``."""

    @property
    def address(self) -> str: ...

    async def sign_typed_data(self, typed_data: dict[str, Any]) -> str: ...


# ── Module-level signing function (must be picklable for multiprocessing) ──


def _sign_typed_data_sync(typed_data: dict[str, Any], private_key: str) -> str:
    """Synchronous signing executed in a worker process.

    Returns the 65-byte ``r || s || v`` signature as ``0x`` hex.
    """
    signed = Account.sign_typed_data(private_key, full_message=typed_data)
    return "0x" + bytes(signed.signature).hex()


# ── Async signer class ──────────────────────────────────────────────


class EIP712Signer:
    """Async-safe EIP-712 typed-data signer backed by a process pool.

    Parameters
    ----------
    private_key:
        Hex-encoded private key (``0x`` prefix optional).
    max_workers:
        Number of processes in the signing pool.  Defaults to 1; the
        pipeline signs its two payloads one after the other.
    """

    def __init__(self, private_key: str, max_workers: int = 1) -> None:
        try:
            account = Account.from_key(private_key)
        except Exception as exc:
            raise SigningFailure(f"invalid private key: {exc}") from exc
        self._private_key = private_key
        self._address: str = account.address
        self._max_workers = max_workers
        self._pool: ProcessPoolExecutor | None = None

    @property
    def address(self) -> str:
        """Checksummed address of the signing account."""
        return self._address

    # ── Lifecycle ────────────────────────────────────────────────

    def start(self) -> None:
        """Start the process pool.  Idempotent."""
        if self._pool is None:
            self._pool = ProcessPoolExecutor(max_workers=self._max_workers)
            logger.info(
                "eip712_signer.started",
                address=self._address,
                max_workers=self._max_workers,
            )

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the process pool."""
        if self._pool is not None:
            self._pool.shutdown(wait=wait)
            self._pool = None
            logger.info("eip712_signer.shutdown")

    # ── Signing ──────────────────────────────────────────────────

    async def sign_typed_data(self, typed_data: dict[str, Any]) -> str:
        """Sign an EIP-712 descriptor asynchronously (offloaded to process pool).

        Raises
        ------
        RuntimeError
            If the signer has not been started.
        SigningFailure
            If the typed data cannot be encoded or signed.
        """
        if self._pool is None:
            raise RuntimeError(
                "EIP712Signer not started; call start() first"
            )

        loop = asyncio.get_running_loop()
        try:
            signature = await loop.run_in_executor(
                self._pool,
                _sign_typed_data_sync,
                typed_data,
                self._private_key,
            )
        except Exception as exc:
            logger.error(
                "eip712_signer.failed",
                primary_type=typed_data.get("primaryType"),
                error=str(exc),
            )
            raise SigningFailure(f"typed-data signing failed: {exc}") from exc

        logger.debug(
            "eip712_signer.signed",
            primary_type=typed_data.get("primaryType"),
        )
        return signature

    # ── Context manager ──────────────────────────────────────────

    async def __aenter__(self) -> EIP712Signer:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.shutdown(wait=True)
