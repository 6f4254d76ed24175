"""Errors raised by the epoch publisher.

Callers can catch ``OrandError`` to handle every failure this package
raises itself. Transport and contract errors coming from web3 are not
wrapped; they reach the caller exactly as the binding raised them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from orand.models.proof import VerificationResult


class OrandError(Exception):
    """Base class for all publisher errors."""


class ConfigurationError(OrandError):
    """A required setting (endpoint, contract address, key) is missing or invalid."""


class MalformedProofError(OrandError):
    """An epoch record does not have the shape the verifier expects."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Malformed epoch proof field '{field}': {reason}")


class ProofRejectedError(OrandError):
    """The provider contract reported the dual proof as invalid.

    Raised before any transaction is submitted. The full verification
    result is attached so the caller can decide whether to regenerate
    the proof or give up.
    """

    def __init__(self, result: VerificationResult) -> None:
        self.result = result
        super().__init__(
            f"Invalid dual proof (signer={result.ecdsa_proof.signer}, "
            f"receiver epoch={result.ecdsa_proof.receiver_epoch}, "
            f"linked={result.is_epoch_linked})"
        )
