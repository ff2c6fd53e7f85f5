"""
CLI integration tests using Click's test runner.

Network access is replaced by the in-memory FakeEndpoint, so these run
without a node.
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from tabulate import tabulate

from stylus_ink_bench.cli import VERSION, cli
from stylus_ink_bench.errors import RpcTransportError

from conftest import DEV_KEY, OTHER_PROGRAM, PROGRAM, SAMPLE_TRACE_INK, FakeEndpoint, rpc_body

TX_HASH = "0x" + "ab" * 32


def _frame(start_ink: int = 0, end_ink: int = 0) -> dict:
    return {"name": "hostio", "args": "0x", "outs": "0x", "startInk": start_ink, "endInk": end_ink}


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def fake_node(monkeypatch: pytest.MonkeyPatch) -> FakeEndpoint:
    """Route every command's endpoint to one FakeEndpoint."""
    endpoint = FakeEndpoint()
    for name in ("run", "trace", "compare"):
        module = importlib.import_module(f"stylus_ink_bench.commands.{name}")
        monkeypatch.setattr(module, "make_endpoint", lambda url, timeout=30.0: endpoint)
    return endpoint


@pytest.fixture()
def no_key_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PRIVATE_KEY", raising=False)
    monkeypatch.chdir(tmp_path)


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert VERSION in result.output


class TestCalldata:
    def test_selector_and_argument(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["calldata", "-s", "setNumber(uint)", "-a", "0xdeadbeef"])
        assert result.exit_code == 0
        assert result.output.strip() == "0x3fb5c1cb" + "00" * 28 + "deadbeef"

    def test_no_arguments(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["calldata", "-s", "number()"])
        assert result.exit_code == 0
        assert result.output.strip() == "0x8381f58a"

    def test_count_mismatch(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["calldata", "-s", "setNumber(uint)"])
        assert result.exit_code == 2
        assert "mismatch number of arguments (want 1; got 0)" in result.output


class TestRun:
    def test_prints_ink_and_gas(self, runner: CliRunner, fake_node: FakeEndpoint) -> None:
        result = runner.invoke(
            cli,
            ["run", "-k", DEV_KEY, "-p", PROGRAM, "-s", "setNumber(uint)", "-a", "0xdeadbeef"],
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [f"{SAMPLE_TRACE_INK} ink", f"{SAMPLE_TRACE_INK / 10_000} gas"]
        assert len(fake_node.sent) == 1

    def test_whole_gas(self, runner: CliRunner, fake_node: FakeEndpoint) -> None:
        fake_node.trace_body = rpc_body([_frame(start_ink=30_000), _frame(end_ink=10_000), _frame()])
        result = runner.invoke(cli, ["run", "-k", DEV_KEY, "-p", PROGRAM, "-s", "number()"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["20000 ink", "2 gas"]

    def test_key_from_environment(
        self, runner: CliRunner, fake_node: FakeEndpoint, no_key_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEY", DEV_KEY[2:])
        result = runner.invoke(cli, ["run", "-p", PROGRAM, "-s", "increment()"])
        assert result.exit_code == 0, result.output
        assert f"{SAMPLE_TRACE_INK} ink" in result.output

    def test_missing_key(self, runner: CliRunner, fake_node: FakeEndpoint, no_key_env: None) -> None:
        result = runner.invoke(cli, ["run", "-p", PROGRAM, "-s", "number()"])
        assert result.exit_code == 1
        assert "PRIVATE_KEY not found" in result.output
        assert fake_node.calls == []

    def test_cause_chain(self, runner: CliRunner, fake_node: FakeEndpoint) -> None:
        fake_node.nonce_error = RpcTransportError("connection refused")
        result = runner.invoke(cli, ["run", "-k", DEV_KEY, "-p", PROGRAM, "-s", "number()"])
        assert result.exit_code == 3
        assert "Error: failed to get nonce for 0x" in result.output
        assert result.output.rstrip().endswith(": connection refused")

    def test_reverted(self, runner: CliRunner, fake_node: FakeEndpoint) -> None:
        fake_node.status = "0x0"
        result = runner.invoke(cli, ["run", "-k", DEV_KEY, "-p", PROGRAM, "-s", "number()"])
        assert result.exit_code == 3
        assert "reverted" in result.output

    def test_trace_failure(self, runner: CliRunner, fake_node: FakeEndpoint) -> None:
        fake_node.trace_body = json.dumps({"jsonrpc": "2.0", "id": "1", "result": []})
        result = runner.invoke(cli, ["run", "-k", DEV_KEY, "-p", PROGRAM, "-s", "number()"])
        assert result.exit_code == 4
        assert "too short" in result.output

    def test_bad_argument_sends_nothing(self, runner: CliRunner, fake_node: FakeEndpoint) -> None:
        result = runner.invoke(
            cli, ["run", "-k", DEV_KEY, "-p", PROGRAM, "-s", "setNumber(uint)", "-a", "abc"]
        )
        assert result.exit_code == 2
        assert "could not parse arg: uint" in result.output
        assert fake_node.calls == []


class TestTrace:
    def test_rpc_url_from_environment(
        self, runner: CliRunner, fake_node: FakeEndpoint, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        urls: list[str] = []

        def make_endpoint(url: str, timeout: float = 30.0) -> FakeEndpoint:
            urls.append(url)
            return fake_node

        monkeypatch.setattr(importlib.import_module("stylus_ink_bench.commands.trace"), "make_endpoint", make_endpoint)
        monkeypatch.setenv("STYLUS_RPC_URL", "http://node.test:8547")
        assert runner.invoke(cli, ["trace", TX_HASH]).exit_code == 0
        monkeypatch.delenv("STYLUS_RPC_URL")
        assert runner.invoke(cli, ["trace", TX_HASH]).exit_code == 0
        assert runner.invoke(cli, ["trace", TX_HASH, "-r", "http://other:1"]).exit_code == 0
        assert urls == ["http://node.test:8547", "http://localhost:8547", "http://other:1"]

    def test_existing_transaction(self, runner: CliRunner, fake_node: FakeEndpoint) -> None:
        result = runner.invoke(cli, ["trace", TX_HASH])
        assert result.exit_code == 0, result.output
        assert f"{SAMPLE_TRACE_INK} ink" in result.output
        assert fake_node.sent == []
        assert fake_node.calls[0][2][0] == TX_HASH

    def test_steps(self, runner: CliRunner, fake_node: FakeEndpoint) -> None:
        result = runner.invoke(cli, ["trace", TX_HASH, "--steps"])
        assert result.exit_code == 0, result.output
        assert "read_args" in result.output
        assert "1340 ink" in result.output


class TestCompare:
    @pytest.fixture()
    def plan(self, tmp_path: Path) -> Path:
        path = tmp_path / "counter.json"
        path.write_text(
            json.dumps(
                {
                    "programs": {"opt-3": PROGRAM, "opt-s": OTHER_PROGRAM},
                    "methods": [
                        {"signature": "number()"},
                        {"signature": "setNumber(uint)", "args": ["0xdeadbeef"]},
                    ],
                }
            ),
            encoding="utf-8",
        )
        return path

    def test_table(self, runner: CliRunner, fake_node: FakeEndpoint, plan: Path) -> None:
        result = runner.invoke(cli, ["compare", str(plan), "-k", DEV_KEY])
        assert result.exit_code == 0, result.output
        expected = tabulate(
            [["number()", "1.6790 gas", "1.6790 gas"], ["setNumber(uint)", "1.6790 gas", "1.6790 gas"]],
            headers=["Method", "opt-3", "opt-s"],
            tablefmt="grid",
        )
        assert expected in result.output
        assert len(fake_node.sent) == 4

    def test_table_format(self, runner: CliRunner, fake_node: FakeEndpoint, plan: Path) -> None:
        result = runner.invoke(cli, ["compare", str(plan), "-k", DEV_KEY, "--table-format", "plain"])
        assert result.exit_code == 0, result.output
        table = result.output.splitlines()[-3:]
        assert table[0].split() == ["Method", "opt-3", "opt-s"]
        assert "|" not in "\n".join(table)

    def test_unknown_table_format(self, runner: CliRunner, fake_node: FakeEndpoint, plan: Path) -> None:
        result = runner.invoke(cli, ["compare", str(plan), "-k", DEV_KEY, "--table-format", "nope"])
        assert result.exit_code == 2
        assert fake_node.sent == []

    def test_invalid_plan(self, runner: CliRunner, fake_node: FakeEndpoint, tmp_path: Path) -> None:
        plan = tmp_path / "plan.json"
        plan.write_text(json.dumps({"programs": {}}), encoding="utf-8")
        result = runner.invoke(cli, ["compare", str(plan), "-k", DEV_KEY])
        assert result.exit_code == 1
        assert "programs" in result.output
