"""Tests for the orand CLI — parsing, exit codes and the publish flow."""

import json
from pathlib import Path
from typing import Any

import pytest

from orand import cli
from orand.cli import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, build_parser, main
from orand.publisher import EpochPublisher

from conftest import CONSUMER

ENV_VARS = (
    "RPC_URL",
    "ORAND_PROVIDER_ADDRESS",
    "WALLET_PRIVATE_KEY",
    "CONSUMER_ADDRESS",
    "CHAIN_ID",
    "RPC_TIMEOUT_SECONDS",
)


@pytest.fixture
def epoch_file(tmp_path: Path, epoch_data: dict[str, Any]) -> Path:
    path = tmp_path / "epoch.json"
    path.write_text(json.dumps(epoch_data), encoding="utf-8")
    return path


@pytest.fixture
def env_file(tmp_path: Path, monkeypatch) -> Path:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / ".env"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def configured(env_file: Path, monkeypatch) -> Path:
    monkeypatch.setenv("RPC_URL", "https://rpc.example.org")
    monkeypatch.setenv("ORAND_PROVIDER_ADDRESS", "0x0000000000000000000000000000000000000011")
    monkeypatch.setenv("WALLET_PRIVATE_KEY", "0x" + "11" * 32)
    return env_file


@pytest.fixture
def fake_publisher(monkeypatch, make_binding):
    """Route the CLI to a publisher backed by a fake binding."""
    state: dict[str, Any] = {}

    def install(**kwargs) -> None:
        binding = make_binding(**kwargs)
        state["binding"] = binding

        async def acquire(config):
            state["config"] = config
            return EpochPublisher(binding, config.consumer_address)

        monkeypatch.setattr(cli, "_acquire", acquire)

    state["install"] = install
    return state


class TestCLIParsing:
    def test_publish_command(self) -> None:
        args = build_parser().parse_args(["publish", "epoch.json", "--wait"])
        assert args.command == "publish"
        assert args.epoch_file == Path("epoch.json")
        assert args.wait

    def test_global_options(self) -> None:
        args = build_parser().parse_args(["--consumer", CONSUMER, "--log-level", "DEBUG", "verify", "e.json"])
        assert args.consumer == CONSUMER
        assert args.log_level == "DEBUG"

    def test_no_command_shows_help(self, capsys) -> None:
        assert main([]) == EXIT_OK
        assert "usage" in capsys.readouterr().out


class TestTransform:
    def test_prints_structured_proof(self, epoch_file: Path, capsys) -> None:
        assert main(["transform", str(epoch_file)]) == EXIT_OK
        rendered = json.loads(capsys.readouterr().out)
        assert rendered["ecvrfProof"]["c"] == "0x0abc"

    def test_malformed_epoch(self, tmp_path: Path, epoch_data: dict[str, Any], capsys) -> None:
        epoch_data["gamma"] = "ab" * 10
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(epoch_data), encoding="utf-8")
        assert main(["transform", str(path)]) == EXIT_FAILED
        assert "gamma" in capsys.readouterr().err

    def test_missing_epoch_file(self, tmp_path: Path, capsys) -> None:
        assert main(["transform", str(tmp_path / "nope.json")]) == EXIT_FAILED
        assert "nope.json" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["transform", str(path)]) == EXIT_FAILED
        assert "invalid JSON" in capsys.readouterr().err


class TestVerify:
    def test_missing_config(self, env_file: Path, epoch_file: Path, capsys) -> None:
        exit_code = main(["--env-file", str(env_file), "verify", str(epoch_file)])
        assert exit_code == EXIT_CONFIG
        assert "RPC_URL" in capsys.readouterr().err

    def test_prints_result(self, configured: Path, epoch_file: Path, fake_publisher, capsys) -> None:
        fake_publisher["install"](current_epoch_result=5)
        exit_code = main(["--env-file", str(configured), "verify", str(epoch_file)])
        assert exit_code == EXIT_OK
        rendered = json.loads(capsys.readouterr().out)
        assert rendered["chainState"] == "linked"


class TestPublish:
    def test_missing_key(self, configured: Path, epoch_file: Path, monkeypatch) -> None:
        monkeypatch.delenv("WALLET_PRIVATE_KEY")
        assert main(["--env-file", str(configured), "publish", str(epoch_file)]) == EXIT_CONFIG

    def test_genesis(self, configured: Path, epoch_file: Path, fake_publisher, capsys) -> None:
        fake_publisher["install"](current_epoch_result=0)
        exit_code = main(["--env-file", str(configured), "publish", str(epoch_file), "--wait"])
        assert exit_code == EXIT_OK
        out = capsys.readouterr().out
        assert "via genesis" in out
        assert "Tx: 0x" + "01" * 32 in out
        assert "Block: 42" in out

    def test_consumer_override(self, configured: Path, epoch_file: Path, fake_publisher) -> None:
        fake_publisher["install"](current_epoch_result=5)
        other = "0x0000000000000000000000000000000000000022"
        exit_code = main(["--env-file", str(configured), "--consumer", other, "publish", str(epoch_file)])
        assert exit_code == EXIT_OK
        assert fake_publisher["binding"].mutating_calls[0][1] == other

    def test_rejected_proof(self, configured: Path, epoch_file: Path, fake_publisher, capsys) -> None:
        fake_publisher["install"](valid=False)
        exit_code = main(["--env-file", str(configured), "publish", str(epoch_file)])
        assert exit_code == EXIT_FAILED
        assert "Invalid dual proof" in capsys.readouterr().err
        assert fake_publisher["binding"].mutating_calls == []
