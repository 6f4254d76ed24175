"""Orand CLI — publish off-chain VRF epochs to the provider contract.

Usage:
    python -m orand.cli transform epoch.json
    python -m orand.cli verify epoch.json
    python -m orand.cli publish epoch.json --wait
    python -m orand.cli --env-file deploy/.env --consumer 0xabc... publish epoch.json

Connection settings come from the environment (or a .env file):
RPC_URL, ORAND_PROVIDER_ADDRESS, WALLET_PRIVATE_KEY, and optionally
CONSUMER_ADDRESS, CHAIN_ID, RPC_TIMEOUT_SECONDS.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path

from orand.config import PublisherConfig
from orand.crypto.codec import transform_proof
from orand.errors import ConfigurationError, MalformedProofError, ProofRejectedError
from orand.models.epoch import EpochRecord
from orand.publisher import DEFAULT_RECEIPT_TIMEOUT, EpochPublisher, PublisherRegistry


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def _load_config(args: argparse.Namespace, require_key: bool) -> PublisherConfig:
    config = PublisherConfig.from_env(args.env_file, require_key=require_key)
    if args.consumer:
        config = dataclasses.replace(config, consumer_address=args.consumer)
    return config


async def _acquire(config: PublisherConfig) -> EpochPublisher:
    registry = PublisherRegistry(timeout=config.rpc_timeout, chain_id=config.chain_id)
    return await registry.acquire(
        config.rpc_url, config.provider_address, config.consumer_address
    )


def cmd_transform(args: argparse.Namespace) -> int:
    record = EpochRecord.from_json_file(args.epoch_file)
    print(json.dumps(transform_proof(record).to_dict(), indent=2))
    return EXIT_OK


def cmd_verify(args: argparse.Namespace) -> int:
    config = _load_config(args, require_key=False)
    record = EpochRecord.from_json_file(args.epoch_file)

    async def run() -> dict:
        publisher = await _acquire(config)
        result = await publisher.verify_epoch(record)
        return result.to_dict()

    print(json.dumps(asyncio.run(run()), indent=2))
    return EXIT_OK


def cmd_publish(args: argparse.Namespace) -> int:
    config = _load_config(args, require_key=True)
    account = config.account()
    record = EpochRecord.from_json_file(args.epoch_file)

    async def run() -> int:
        publisher = await _acquire(config)
        pending = await publisher.publish(record, account)
        print(f"Epoch {pending.epoch} submitted via {pending.entry_point}")
        print(f"  Tx: {pending.tx_hash.to_0x_hex()}")
        if args.wait:
            receipt = await pending.wait(timeout=args.wait_timeout)
            print(f"  Block: {receipt['blockNumber']}  Status: {receipt['status']}")
            if receipt["status"] != 1:
                return EXIT_FAILED
        return EXIT_OK

    return asyncio.run(run())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orand",
        description="Publish off-chain VRF epochs to the Orand provider contract",
    )
    parser.add_argument("--env-file", type=Path, default=None, help="Path to a .env file")
    parser.add_argument("--consumer", help="Consumer contract address (overrides CONSUMER_ADDRESS)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    p_transform = sub.add_parser("transform", help="Print the structured proof for an epoch")
    p_transform.add_argument("epoch_file", type=Path, help="Epoch JSON file")

    p_verify = sub.add_parser("verify", help="Verify an epoch against the provider")
    p_verify.add_argument("epoch_file", type=Path, help="Epoch JSON file")

    p_publish = sub.add_parser("publish", help="Publish an epoch (genesis or continuation)")
    p_publish.add_argument("epoch_file", type=Path, help="Epoch JSON file")
    p_publish.add_argument("--wait", action="store_true", help="Wait for the receipt")
    p_publish.add_argument(
        "--wait-timeout", type=float, default=DEFAULT_RECEIPT_TIMEOUT,
        help=f"Receipt timeout in seconds (default: {DEFAULT_RECEIPT_TIMEOUT:g})",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "transform": cmd_transform,
        "verify": cmd_verify,
        "publish": cmd_publish,
    }

    try:
        return commands[args.command](args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except (MalformedProofError, ProofRejectedError) as exc:
        print(f"Failed: {exc}", file=sys.stderr)
        return EXIT_FAILED
    except OSError as exc:
        print(f"Failed: {exc}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
