"""Structured proof view and the verifier's answer.

A ``StructuredProof`` is derived from an ``EpochRecord`` by the codec
and is never constructed independently. Every hex value in it is
normalized: ``0x``-prefixed with an even number of digits.

``VerificationResult`` is what the provider contract reports for a
proof against its current state. It is consumed once to gate the
submission and pick the entry point, then discarded.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from web3 import Web3


def _uint(value: str) -> int:
    return int(value, 16)


def _address(value: str) -> str:
    digits = value[2:]
    return Web3.to_checksum_address("0x" + digits.rjust(40, "0"))


@dataclass(frozen=True)
class ECVRFProof:
    """ECVRF proof in the field layout of the provider contract.

    The contract already knows the public key, so it is not carried.
    """
    gamma: tuple[str, str]
    c: str
    s: str
    alpha: str
    u_witness: str
    c_gamma_witness: tuple[str, str]
    s_hash_witness: tuple[str, str]
    z_inv: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "gamma": list(self.gamma),
            "c": self.c,
            "s": self.s,
            "alpha": self.alpha,
            "uWitness": self.u_witness,
            "cGammaWitness": list(self.c_gamma_witness),
            "sHashWitness": list(self.s_hash_witness),
            "zInv": self.z_inv,
        }

    def to_contract_args(self) -> tuple:
        """ABI values for the ``ECVRFProof`` struct, in declaration order."""
        return (
            [_uint(v) for v in self.gamma],
            _uint(self.c),
            _uint(self.s),
            _uint(self.alpha),
            _address(self.u_witness),
            [_uint(v) for v in self.c_gamma_witness],
            [_uint(v) for v in self.s_hash_witness],
            _uint(self.z_inv),
        )


@dataclass(frozen=True)
class StructuredProof:
    """The dual proof: ECDSA signature plus ECVRF proof."""
    ecdsa_proof: str
    ecvrf_proof: ECVRFProof

    def to_dict(self) -> dict[str, Any]:
        return {
            "ecdsaProof": self.ecdsa_proof,
            "ecvrfProof": self.ecvrf_proof.to_dict(),
        }

    def to_contract_args(self) -> tuple[bytes, tuple]:
        """Return ``(ecdsa_bytes, ecvrf_struct)`` ready for a contract call."""
        return bytes.fromhex(self.ecdsa_proof[2:]), self.ecvrf_proof.to_contract_args()


class ChainStatus(str, enum.Enum):
    """Whether the provider has anchored an epoch chain for the consumer."""
    UNINITIALIZED = "uninitialized"
    LINKED = "linked"


@dataclass(frozen=True)
class ChainState:
    """Tagged view of the consumer's on-chain epoch state.

    ``UNINITIALIZED`` means no epoch has been recorded yet and the next
    publication must be a genesis. ``LINKED`` carries the current epoch
    result that a continuation will chain onto.
    """
    status: ChainStatus
    epoch_result: Optional[int] = None

    @classmethod
    def uninitialized(cls) -> ChainState:
        return cls(ChainStatus.UNINITIALIZED)

    @classmethod
    def linked(cls, epoch_result: int) -> ChainState:
        if epoch_result == 0:
            raise ValueError("A linked chain state needs a non-zero epoch result")
        return cls(ChainStatus.LINKED, epoch_result)

    @property
    def is_genesis(self) -> bool:
        return self.status == ChainStatus.UNINITIALIZED


@dataclass(frozen=True)
class ECDSAProofInfo:
    """Fields the contract recovers from the ECDSA proof."""
    signer: str
    receiver_address: str
    receiver_epoch: int
    ecvrf_proof_digest: int


@dataclass(frozen=True)
class VerificationResult:
    """Answer of the provider's read-only ``verifyEpoch`` call."""
    ecdsa_proof: ECDSAProofInfo
    current_epoch_number: int
    is_epoch_linked: bool
    is_valid_dual_proof: bool
    current_epoch_result: int
    verified_epoch_result: int

    @classmethod
    def from_call(cls, raw: Sequence[Any]) -> VerificationResult:
        """Parse the tuple returned by ``verifyEpoch``."""
        (
            ecdsa,
            current_epoch_number,
            is_epoch_linked,
            is_valid_dual_proof,
            current_epoch_result,
            verified_epoch_result,
        ) = raw
        signer, receiver_address, receiver_epoch, digest = ecdsa
        return cls(
            ecdsa_proof=ECDSAProofInfo(
                signer=signer,
                receiver_address=receiver_address,
                receiver_epoch=int(receiver_epoch),
                ecvrf_proof_digest=int(digest),
            ),
            current_epoch_number=int(current_epoch_number),
            is_epoch_linked=bool(is_epoch_linked),
            is_valid_dual_proof=bool(is_valid_dual_proof),
            current_epoch_result=int(current_epoch_result),
            verified_epoch_result=int(verified_epoch_result),
        )

    @property
    def chain_state(self) -> ChainState:
        """Genesis is due exactly when the current epoch result is zero."""
        if self.current_epoch_result == 0:
            return ChainState.uninitialized()
        return ChainState.linked(self.current_epoch_result)

    def to_dict(self) -> dict[str, Any]:
        # uint256 values are rendered as strings so JSON consumers keep precision
        return {
            "ecdsaProof": {
                "signer": self.ecdsa_proof.signer,
                "receiverAddress": self.ecdsa_proof.receiver_address,
                "receiverEpoch": self.ecdsa_proof.receiver_epoch,
                "ecvrfProofDigest": str(self.ecdsa_proof.ecvrf_proof_digest),
            },
            "currentEpochNumber": self.current_epoch_number,
            "isEpochLinked": self.is_epoch_linked,
            "isValidDualProof": self.is_valid_dual_proof,
            "currentEpochResult": str(self.current_epoch_result),
            "verifiedEpochResult": str(self.verified_epoch_result),
            "chainState": self.chain_state.status.value,
        }
