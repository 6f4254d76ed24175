"""Orand epoch publisher — submits off-chain VRF epochs to the provider contract."""

from orand.crypto.codec import normalize_hex, transform_proof
from orand.errors import (
    ConfigurationError,
    MalformedProofError,
    OrandError,
    ProofRejectedError,
)
from orand.models.epoch import EpochRecord
from orand.models.proof import ChainState, StructuredProof, VerificationResult
from orand.publisher import EpochPublisher, PendingTransaction, PublisherRegistry

__version__ = "0.1.0"

__all__ = [
    "ChainState",
    "ConfigurationError",
    "EpochPublisher",
    "EpochRecord",
    "MalformedProofError",
    "OrandError",
    "PendingTransaction",
    "ProofRejectedError",
    "PublisherRegistry",
    "StructuredProof",
    "VerificationResult",
    "normalize_hex",
    "transform_proof",
]
