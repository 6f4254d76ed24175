"""Proof codec — turns flat epoch records into the verifier's argument format."""

from orand.crypto.codec import normalize_hex, split_pair, transform_proof

__all__ = ["normalize_hex", "split_pair", "transform_proof"]
