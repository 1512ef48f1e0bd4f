"""
Integration tests for the command line interface.
"""

import logging
import os

import pytest
from click.testing import CliRunner

from incmerkle.cli.main import cli
from incmerkle.core import MerkleTree
from incmerkle.crypto import get_hasher, bytes_to_hex
from incmerkle.utils.logger import setup_logging
from incmerkle.utils.validation import MAX_ITEM_SIZE


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI points log handlers at the runner's streams; restore afterwards."""
    saved = {k: os.environ.pop(k) for k in list(os.environ) if k.startswith("INCMERKLE_")}
    yield
    setup_logging(level=logging.WARNING)
    os.environ.update(saved)


def output_field(output: str, label: str) -> str:
    for line in output.splitlines():
        if line.startswith(label):
            return line.split(":", 1)[1].strip()
    raise AssertionError(f"{label!r} not in output:\n{output}")


class TestRootCommand:
    """Tests for `incmerkle root`."""

    def test_root_matches_library(self, runner):
        result = runner.invoke(cli, ["root", "a", "b", "c", "--height", "0"])

        assert result.exit_code == 0, result.output
        expected = MerkleTree(0, get_hasher("sha256"))
        for item in (b"a", b"b", b"c"):
            expected.insert(item)
        assert output_field(result.output, "Root") == bytes_to_hex(expected.root())
        assert output_field(result.output, "Leaf count") == "4"
        assert output_field(result.output, "Size") == "3"
        assert output_field(result.output, "Height") == "1"

    def test_hex_items(self, runner):
        result = runner.invoke(cli, ["root", "--hex", "0x01", "02", "--hash", "keccak256"])

        assert result.exit_code == 0, result.output
        expected = MerkleTree(2, get_hasher("keccak256"))
        expected.insert(b"\x01")
        expected.insert(b"\x02")
        assert output_field(result.output, "Root") == bytes_to_hex(expected.root())

    def test_no_items_uses_config_height(self, runner):
        result = runner.invoke(cli, ["root"])
        assert result.exit_code == 0, result.output
        assert output_field(result.output, "Leaf count") == "8"

    def test_env_height(self, runner):
        result = runner.invoke(cli, ["root"], env={"INCMERKLE_HEIGHT": "0"})
        assert result.exit_code == 0, result.output
        assert output_field(result.output, "Leaf count") == "2"

    def test_invalid_env(self, runner):
        result = runner.invoke(cli, ["root"], env={"INCMERKLE_HASH": "md5"})
        assert result.exit_code == 2
        assert "Invalid configuration" in result.output

    def test_bad_hex(self, runner):
        result = runner.invoke(cli, ["root", "--hex", "zz"])
        assert result.exit_code == 2

    def test_oversized_item(self, runner):
        big = "00" * (MAX_ITEM_SIZE + 1)
        result = runner.invoke(cli, ["root", "--hex", "01", big])
        assert result.exit_code == 2
        assert "exceeds max length" in result.output

    def test_unknown_hash(self, runner):
        result = runner.invoke(cli, ["root", "a", "--hash", "md5"])
        assert result.exit_code == 2
        assert "Unknown hash algorithm" in result.output

    def test_negative_height(self, runner):
        result = runner.invoke(cli, ["root", "a", "--height=-1"])
        assert result.exit_code == 2


class TestOtherCommands:
    """Tests for leaves / hashers."""

    def test_leaves(self, runner):
        result = runner.invoke(cli, ["leaves", "a", "--height", "0"])

        assert result.exit_code == 0, result.output
        assert f"[0] {bytes_to_hex(get_hasher('sha256').hash(b'a'))}" in result.output
        assert "[1] <empty>" in result.output

    def test_hashers(self, runner):
        result = runner.invoke(cli, ["hashers"])
        assert result.exit_code == 0
        for name in ("sha256", "sha256d", "keccak256"):
            assert name in result.output

    def test_debug_flag(self, runner):
        result = runner.invoke(cli, ["--debug", "root", "a"])
        assert result.exit_code == 0, result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
