"""Web3 binding for the Orand provider contract.

Wraps one ``AsyncWeb3`` connection and one contract instance. The
binding knows how to encode a ``StructuredProof`` into call arguments,
how to read the verifier's answer, and how to sign and send the two
state-mutating entry points with a local ``eth_account`` account.

Nothing here retries or recovers: web3 errors propagate as raised.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import AsyncHTTPProvider, AsyncWeb3

from orand.chain.abi import ORAND_PROVIDER_ABI
from orand.models.proof import StructuredProof, VerificationResult

logger = logging.getLogger(__name__)


class ProviderBinding:
    """Read/write access to one provider contract over one RPC endpoint."""

    def __init__(self, w3: AsyncWeb3, contract: Any, chain_id: Optional[int] = None) -> None:
        self._w3 = w3
        self._contract = contract
        self._chain_id = chain_id

    @classmethod
    def connect(
        cls,
        rpc_url: str,
        provider_address: str,
        chain_id: Optional[int] = None,
    ) -> ProviderBinding:
        """Create the HTTP connection and contract instance.

        No request is made until the first call.
        """
        w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        contract = w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(provider_address),
            abi=ORAND_PROVIDER_ABI,
        )
        logger.info("Bound provider %s via %s", contract.address, rpc_url)
        return cls(w3, contract, chain_id=chain_id)

    @property
    def address(self) -> str:
        return self._contract.address

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def verify_epoch(self, proof: StructuredProof) -> VerificationResult:
        """Ask the provider to check the dual proof against its current state."""
        ecdsa_proof, ecvrf_proof = proof.to_contract_args()
        raw = await self._contract.functions.verifyEpoch(ecdsa_proof, ecvrf_proof).call()
        return VerificationResult.from_call(raw)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def sign_genesis(self, proof: StructuredProof, account: LocalAccount) -> bytes:
        """Build and sign the first-epoch transaction for a consumer.

        Returns the raw signed transaction; nothing is broadcast yet.
        """
        ecdsa_proof, ecvrf_proof = proof.to_contract_args()
        return await self._sign(
            self._contract.functions.genesis(ecdsa_proof, ecvrf_proof), account
        )

    async def sign_publish(
        self,
        consumer_address: str,
        proof: StructuredProof,
        account: LocalAccount,
    ) -> bytes:
        """Build and sign a continuation-epoch transaction."""
        _, ecvrf_proof = proof.to_contract_args()
        return await self._sign(
            self._contract.functions.publish(
                AsyncWeb3.to_checksum_address(consumer_address), ecvrf_proof
            ),
            account,
        )

    async def send_raw_transaction(self, raw_transaction: bytes) -> HexBytes:
        """Broadcast a signed transaction. Returns its hash."""
        return await self._w3.eth.send_raw_transaction(raw_transaction)

    async def wait_for_receipt(self, tx_hash: HexBytes, timeout: float) -> Any:
        return await self._w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)

    async def _sign(self, function: Any, account: LocalAccount) -> bytes:
        params: dict[str, Any] = {
            "from": account.address,
            "nonce": await self._w3.eth.get_transaction_count(account.address, "pending"),
        }
        if self._chain_id is not None:
            params["chainId"] = self._chain_id
        tx = await function.build_transaction(params)
        return bytes(account.sign_transaction(tx).raw_transaction)
