"""Epoch publisher — verify a proof on-chain, then publish it.

The provider contract tracks, per consumer, a chain of epochs:

    UNINITIALIZED --genesis--> LINKED --publish--> LINKED --publish--> ...

The publisher never moves this state itself. It reads it through the
provider's ``verifyEpoch`` view and submits whichever transaction the
contract needs next:

1. The record is transformed into a ``StructuredProof``.
2. ``verifyEpoch`` checks the dual proof against current state.
3. An invalid dual proof stops here with ``ProofRejectedError``;
   no transaction is sent.
4. If no epoch is recorded yet, ``genesis(ecdsaProof, ecvrfProof)`` is
   sent; otherwise ``publish(consumer, ecvrfProof)``.
5. The pending transaction is returned; confirming it is up to the caller.

Publishers are handed out by a ``PublisherRegistry``, which keeps one
instance per (endpoint, provider, consumer) triple so repeated calls
reuse the same connection. Calls sharing a publisher are serialized.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, TypeVar

from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes

from orand.chain.provider import ProviderBinding
from orand.crypto.codec import transform_proof
from orand.errors import ProofRejectedError
from orand.models.epoch import EpochRecord
from orand.models.proof import StructuredProof, VerificationResult

logger = logging.getLogger(__name__)

DEFAULT_RPC_TIMEOUT = 30.0
DEFAULT_RECEIPT_TIMEOUT = 120.0

ENTRY_GENESIS = "genesis"
ENTRY_PUBLISH = "publish"

BindingFactory = Callable[[str, str], ProviderBinding]

T = TypeVar("T")


@dataclass(frozen=True)
class PendingTransaction:
    """A submitted, not yet confirmed, epoch transaction."""
    tx_hash: HexBytes
    entry_point: str  # ENTRY_GENESIS or ENTRY_PUBLISH
    epoch: int
    _binding: ProviderBinding = field(repr=False, compare=False)

    async def wait(self, timeout: float = DEFAULT_RECEIPT_TIMEOUT) -> Any:
        """Wait for the transaction receipt."""
        return await self._binding.wait_for_receipt(self.tx_hash, timeout=timeout)


class EpochPublisher:
    """Publishes epochs for one consumer through one provider binding."""

    def __init__(
        self,
        binding: ProviderBinding,
        consumer_address: str,
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ) -> None:
        self._binding = binding
        self._consumer_address = consumer_address
        self._timeout = timeout
        self._lock = asyncio.Lock()

    @property
    def binding(self) -> ProviderBinding:
        return self._binding

    @property
    def consumer_address(self) -> str:
        return self._consumer_address

    async def verify_epoch(self, record: EpochRecord) -> VerificationResult:
        """Verify a record against the provider without changing chain state."""
        return await self._verify(transform_proof(record))

    async def publish(self, record: EpochRecord, account: LocalAccount) -> PendingTransaction:
        """Verify, then submit genesis or continuation for ``record``.

        Raises ProofRejectedError if the provider reports the dual proof
        as invalid. Transport and contract errors propagate unchanged.
        The timeout covers verification and transaction signing only;
        the broadcast itself is left to the transport so a hash the node
        accepted is always returned.
        """
        proof = transform_proof(record)
        async with self._lock:
            result = await self._verify(proof)
            if not result.is_valid_dual_proof:
                logger.warning(
                    "Epoch %d rejected by provider %s (linked=%s)",
                    record.epoch, self._binding.address, result.is_epoch_linked,
                )
                raise ProofRejectedError(result)

            state = result.chain_state
            if state.is_genesis:
                entry_point = ENTRY_GENESIS
                raw_transaction = await self._bounded(self._binding.sign_genesis(proof, account))
            else:
                entry_point = ENTRY_PUBLISH
                raw_transaction = await self._bounded(
                    self._binding.sign_publish(self._consumer_address, proof, account)
                )
            tx_hash = HexBytes(await self._binding.send_raw_transaction(raw_transaction))

        logger.info(
            "Submitted %s for epoch %d to %s: %s",
            entry_point, record.epoch, self._consumer_address, tx_hash.to_0x_hex(),
        )
        return PendingTransaction(
            tx_hash=tx_hash,
            entry_point=entry_point,
            epoch=record.epoch,
            _binding=self._binding,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _verify(self, proof: StructuredProof) -> VerificationResult:
        result = await self._bounded(self._binding.verify_epoch(proof))
        logger.debug(
            "verifyEpoch: valid=%s linked=%s current epoch=%d result=%d",
            result.is_valid_dual_proof, result.is_epoch_linked,
            result.current_epoch_number, result.current_epoch_result,
        )
        return result

    async def _bounded(self, call: Awaitable[T]) -> T:
        return await asyncio.wait_for(call, timeout=self._timeout)


def _default_factory(chain_id: Optional[int]) -> BindingFactory:
    return functools.partial(ProviderBinding.connect, chain_id=chain_id)


class PublisherRegistry:
    """Keyed cache of publishers, one per (endpoint, provider, consumer).

    Entries are created lazily on first request and kept for the
    lifetime of the registry. Construction is single-flight: concurrent
    requests for a new triple get the same instance.

    Usage:
        registry = PublisherRegistry()
        publisher = await registry.acquire(rpc_url, provider, consumer)
        pending = await publisher.publish(record, account)
    """

    def __init__(
        self,
        factory: Optional[BindingFactory] = None,
        timeout: float = DEFAULT_RPC_TIMEOUT,
        chain_id: Optional[int] = None,
    ) -> None:
        self._factory = factory or _default_factory(chain_id)
        self._timeout = timeout
        self._publishers: dict[str, EpochPublisher] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def key(rpc_url: str, provider_address: str, consumer_address: str) -> str:
        return f"{rpc_url}/{provider_address}/{consumer_address}"

    async def acquire(
        self,
        rpc_url: str,
        provider_address: str,
        consumer_address: str,
    ) -> EpochPublisher:
        """Return the publisher for this triple, creating it if needed."""
        key = self.key(rpc_url, provider_address, consumer_address)
        async with self._lock:
            publisher = self._publishers.get(key)
            if publisher is not None:
                logger.debug("Reusing publisher for %s", key)
                return publisher
            binding = self._factory(rpc_url, provider_address)
            publisher = EpochPublisher(binding, consumer_address, timeout=self._timeout)
            self._publishers[key] = publisher
            return publisher

    def __contains__(self, key: object) -> bool:
        return key in self._publishers

    def __len__(self) -> int:
        return len(self._publishers)
