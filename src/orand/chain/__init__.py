"""Chain access — provider contract ABI and the web3 binding."""

from orand.chain.abi import ORAND_PROVIDER_ABI
from orand.chain.provider import ProviderBinding

__all__ = ["ORAND_PROVIDER_ABI", "ProviderBinding"]
