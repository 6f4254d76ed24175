"""Proof codec — flat epoch record to structured proof.

The off-chain generator writes bare hex strings of whatever length the
numbers happen to have, and packs each curve point (two 32-byte field
elements) into one 128-digit string. The provider contract wants every
scalar as an even-length ``0x`` value and every point as a pair.

Invariants:
- Every hex value produced here has a ``0x`` prefix and an even digit count.
- ``normalize_hex`` is idempotent.
- Paired fields are exactly 128 digits; anything else is rejected rather
  than silently truncated.

Pure functions only: no I/O, no state.
"""

from __future__ import annotations

import re

from orand.errors import MalformedProofError
from orand.models.epoch import EpochRecord
from orand.models.proof import ECVRFProof, StructuredProof


FIELD_ELEMENT_DIGITS = 64
PAIR_DIGITS = 2 * FIELD_ELEMENT_DIGITS
ADDRESS_DIGITS = 40

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def _has_prefix(value: str) -> bool:
    return value[:2] in ("0x", "0X")


def _digits(value: str) -> str:
    return value[2:] if _has_prefix(value) else value


def normalize_hex(value: str) -> str:
    """Left-pad an odd digit count with one ``0`` and ensure a ``0x`` prefix.

    An existing prefix is kept as found. ``""`` becomes ``"0x"``.
    """
    prefix = value[:2] if _has_prefix(value) else "0x"
    digits = _digits(value)
    if len(digits) % 2:
        digits = "0" + digits
    return prefix + digits


def _checked_digits(name: str, value: str) -> str:
    digits = _digits(value)
    if not _HEX_DIGITS.fullmatch(digits):
        raise MalformedProofError(name, f"not a hex string: {value!r}")
    if not digits:
        raise MalformedProofError(name, "empty value")
    return digits


def split_pair(name: str, value: str) -> tuple[str, str]:
    """Split a 128-digit point encoding into two normalized field elements."""
    digits = _checked_digits(name, value)
    if len(digits) != PAIR_DIGITS:
        raise MalformedProofError(
            name, f"expected {PAIR_DIGITS} hex digits, got {len(digits)}"
        )
    return (
        normalize_hex(digits[:FIELD_ELEMENT_DIGITS]),
        normalize_hex(digits[FIELD_ELEMENT_DIGITS:]),
    )


def _scalar(name: str, value: str) -> str:
    _checked_digits(name, value)
    return normalize_hex(value)


def _address(name: str, value: str) -> str:
    digits = _checked_digits(name, value)
    if len(digits) > ADDRESS_DIGITS:
        raise MalformedProofError(
            name, f"an address has at most {ADDRESS_DIGITS} hex digits, got {len(digits)}"
        )
    return normalize_hex(value)


def transform_proof(record: EpochRecord) -> StructuredProof:
    """Repackage an epoch record as the provider's (ecdsaProof, ecvrfProof) pair."""
    return StructuredProof(
        ecdsa_proof=_scalar("signatureProof", record.signature_proof),
        ecvrf_proof=ECVRFProof(
            gamma=split_pair("gamma", record.gamma),
            c=_scalar("c", record.c),
            s=_scalar("s", record.s),
            alpha=_scalar("alpha", record.alpha),
            u_witness=_address("witnessAddress", record.witness_address),
            c_gamma_witness=split_pair("witnessGamma", record.witness_gamma),
            s_hash_witness=split_pair("witnessHash", record.witness_hash),
            z_inv=_scalar("inverseZ", record.inverse_z),
        ),
    )
