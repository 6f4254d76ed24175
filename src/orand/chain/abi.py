"""ABI fragment of the Orand provider contract.

Only the three entry points the publisher uses are declared:
``verifyEpoch`` (view), ``genesis`` and ``publish`` (state-mutating).
"""

from __future__ import annotations

from typing import Any


def _uint256_pair(name: str) -> dict[str, str]:
    return {"internalType": "uint256[2]", "name": name, "type": "uint256[2]"}


def _uint256(name: str) -> dict[str, str]:
    return {"internalType": "uint256", "name": name, "type": "uint256"}


ECVRF_PROOF_COMPONENTS: list[dict[str, str]] = [
    _uint256_pair("gamma"),
    _uint256("c"),
    _uint256("s"),
    _uint256("alpha"),
    {"internalType": "address", "name": "uWitness", "type": "address"},
    _uint256_pair("cGammaWitness"),
    _uint256_pair("sHashWitness"),
    _uint256("zInv"),
]

_ECVRF_PROOF_INPUT: dict[str, Any] = {
    "components": ECVRF_PROOF_COMPONENTS,
    "internalType": "struct IOrandECVRFV3.ECVRFProof",
    "name": "ecvrfProof",
    "type": "tuple",
}

_FRAUD_PROOF_INPUT: dict[str, str] = {
    "internalType": "bytes",
    "name": "fraudProof",
    "type": "bytes",
}

ORAND_PROVIDER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [_FRAUD_PROOF_INPUT, _ECVRF_PROOF_INPUT],
        "name": "verifyEpoch",
        "outputs": [
            {
                "components": [
                    {"internalType": "address", "name": "signer", "type": "address"},
                    {"internalType": "address", "name": "receiverAddress", "type": "address"},
                    {"internalType": "uint96", "name": "receiverEpoch", "type": "uint96"},
                    _uint256("ecvrfProofDigest"),
                ],
                "internalType": "struct IOrandECDSAV3.OrandECDSAProof",
                "name": "ecdsaProof",
                "type": "tuple",
            },
            {"internalType": "uint96", "name": "currentEpochNumber", "type": "uint96"},
            {"internalType": "bool", "name": "isEpochLinked", "type": "bool"},
            {"internalType": "bool", "name": "isValidDualProof", "type": "bool"},
            _uint256("currentEpochResult"),
            _uint256("verifiedEpochResult"),
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [_FRAUD_PROOF_INPUT, _ECVRF_PROOF_INPUT],
        "name": "genesis",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "receiverAddress", "type": "address"},
            _ECVRF_PROOF_INPUT,
        ],
        "name": "publish",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]
