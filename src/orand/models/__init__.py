"""Data models — flat epoch records and the structured proof view."""

from orand.models.epoch import EpochRecord
from orand.models.proof import (
    ChainState,
    ChainStatus,
    ECDSAProofInfo,
    ECVRFProof,
    StructuredProof,
    VerificationResult,
)

__all__ = [
    "ChainState",
    "ChainStatus",
    "ECDSAProofInfo",
    "ECVRFProof",
    "EpochRecord",
    "StructuredProof",
    "VerificationResult",
]
