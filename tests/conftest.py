"""Shared fixtures: a well-formed epoch and a fake provider binding."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from hexbytes import HexBytes

from orand.models.epoch import EpochRecord
from orand.models.proof import ECDSAProofInfo, VerificationResult


SIGNER = "0x9f2Aa0D1Fbc4a0b2F0a1d64F1D2d6f0A7C1b3E55"
CONSUMER = "0x540AF102792020f7f300a3AF4fF52af1B71BfF69"
GENESIS_TX = HexBytes(b"\x01" * 32)
PUBLISH_TX = HexBytes(b"\x02" * 32)


def _point(x: str, y: str) -> str:
    return x * 32 + y * 32


@pytest.fixture
def epoch_data() -> dict[str, Any]:
    return {
        "epoch": 1,
        "alpha": "2d1b6f49e03a5e1d8c7b09c4f1a3e5d7c9b0a2e4f6d8c0b1a3e5f7d9c1b3a5e7",
        "gamma": _point("a1", "b2"),
        "c": "abc",
        "s": "4f3e2d1c0b0a09080706050403020100ffeeddccbbaa99887766554433221100",
        "y": "77e1d9c3b5a7f9e1d3c5b7a9f1e3d5c7b9a1f3e5d7c9b1a3f5e7d9c1b3a5f7e9",
        "witnessAddress": "7d0d4b5c4f3a1f1c3a8ea0a6d1e5a2b3c4d5e6f7",
        "witnessGamma": _point("c3", "d4"),
        "witnessHash": _point("e5", "f6"),
        "inverseZ": "1234567",
        "signatureProof": "ab" * 65,
        "createdDate": "2024-05-01T00:00:00.000Z",
    }


@pytest.fixture
def epoch_record(epoch_data: dict[str, Any]) -> EpochRecord:
    return EpochRecord.from_dict(epoch_data)


def make_result(valid: bool = True, current_epoch_result: int = 0) -> VerificationResult:
    return VerificationResult(
        ecdsa_proof=ECDSAProofInfo(
            signer=SIGNER,
            receiver_address=CONSUMER,
            receiver_epoch=1,
            ecvrf_proof_digest=0xDEAD,
        ),
        current_epoch_number=0 if current_epoch_result == 0 else 4,
        is_epoch_linked=current_epoch_result != 0,
        is_valid_dual_proof=valid,
        current_epoch_result=current_epoch_result,
        verified_epoch_result=0xBEEF,
    )


class FakeBinding:
    """Records every call instead of talking to a chain."""

    address = "0x0000000000000000000000000000000000000011"

    def __init__(self, result: VerificationResult, delay: float = 0.0, send_delay: float = 0.0) -> None:
        self.result = result
        self.delay = delay
        self.send_delay = send_delay
        self.calls: list[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def verify_epoch(self, proof):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.calls.append(("verifyEpoch", proof))
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.result.is_valid_dual_proof:
            self.in_flight -= 1
        return self.result

    async def sign_genesis(self, proof, account):
        self.calls.append(("genesis", proof.ecdsa_proof, proof.ecvrf_proof))
        return b"signed-genesis"

    async def sign_publish(self, consumer_address, proof, account):
        self.calls.append(("publish", consumer_address, proof.ecvrf_proof))
        return b"signed-publish"

    async def send_raw_transaction(self, raw_transaction):
        self.calls.append(("send", raw_transaction))
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        self.in_flight -= 1
        return GENESIS_TX if raw_transaction == b"signed-genesis" else PUBLISH_TX

    async def wait_for_receipt(self, tx_hash, timeout):
        self.calls.append(("receipt", tx_hash, timeout))
        return {"transactionHash": tx_hash, "blockNumber": 42, "status": 1}

    @property
    def mutating_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("genesis", "publish")]

    @property
    def sent(self) -> list[bytes]:
        return [c[1] for c in self.calls if c[0] == "send"]


@pytest.fixture
def make_binding():
    def factory(
        valid: bool = True,
        current_epoch_result: int = 0,
        delay: float = 0.0,
        send_delay: float = 0.0,
    ) -> FakeBinding:
        return FakeBinding(make_result(valid, current_epoch_result), delay=delay, send_delay=send_delay)
    return factory
