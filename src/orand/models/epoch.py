"""Flat epoch record as emitted by the off-chain proof generator.

The generator writes one JSON object per epoch using camelCase keys.
The record is immutable once produced; nothing in this package
modifies it, it is only read and repackaged for the chain.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from orand.errors import MalformedProofError


# (attribute name, generator key)
_FIELD_KEYS: tuple[tuple[str, str], ...] = (
    ("epoch", "epoch"),
    ("alpha", "alpha"),
    ("gamma", "gamma"),
    ("c", "c"),
    ("s", "s"),
    ("y", "y"),
    ("witness_address", "witnessAddress"),
    ("witness_gamma", "witnessGamma"),
    ("witness_hash", "witnessHash"),
    ("inverse_z", "inverseZ"),
    ("signature_proof", "signatureProof"),
    ("created_date", "createdDate"),
)


@dataclass(frozen=True)
class EpochRecord:
    """One VRF epoch produced off-chain.

    ``gamma``, ``witness_gamma`` and ``witness_hash`` each hold two
    concatenated 32-byte field elements (128 hex digits). ``y`` is the
    VRF output; it is informational and never sent on-chain.
    """
    epoch: int
    alpha: str
    gamma: str
    c: str
    s: str
    y: str
    witness_address: str
    witness_gamma: str
    witness_hash: str
    inverse_z: str
    signature_proof: str
    created_date: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EpochRecord:
        """Build a record from the generator's camelCase mapping."""
        values: dict[str, Any] = {}
        for attr, key in _FIELD_KEYS:
            if key not in data:
                raise MalformedProofError(key, "missing from epoch record")
            values[attr] = data[key]
        try:
            values["epoch"] = int(values["epoch"])
        except (TypeError, ValueError):
            raise MalformedProofError("epoch", f"not an integer: {data['epoch']!r}") from None
        for attr, key in _FIELD_KEYS[1:]:
            if not isinstance(values[attr], str):
                raise MalformedProofError(key, "expected a string")
        return cls(**values)

    @classmethod
    def from_json_file(cls, path: Path) -> EpochRecord:
        """Load a record from a JSON file.

        The file may hold a single epoch object or an array of epochs,
        in which case the last (most recent) one is used.
        """
        try:
            parsed = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise MalformedProofError("epoch", f"invalid JSON in {path}: {exc}") from exc
        if isinstance(parsed, list):
            if not parsed:
                raise MalformedProofError("epoch", f"no epochs in {path}")
            parsed = parsed[-1]
        if not isinstance(parsed, dict):
            raise MalformedProofError("epoch", f"expected a JSON object in {path}")
        return cls.from_dict(parsed)

    def to_dict(self) -> dict[str, Any]:
        """Return the record in the generator's camelCase form."""
        return {key: getattr(self, attr) for attr, key in _FIELD_KEYS}
