from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from post_ledger.__main__ import app
from post_ledger.store import ParquetRecordStore

runner = CliRunner()


def _keygen(tmp_path: Path) -> tuple[Path, str]:
    key_path = tmp_path / "author.pem"
    result = runner.invoke(app, ["keygen", "--out", str(key_path)])
    assert result.exit_code == 0, result.output
    principal = result.output.strip().split("principal: ", 1)[1]
    return key_path, principal


def test_post_and_show(tmp_path: Path) -> None:
    key_path, principal = _keygen(tmp_path)
    store_dir = tmp_path / "records"

    result = runner.invoke(
        app,
        [
            "post",
            "--key", str(key_path),
            "--topic", "veganism",
            "--content", "Yay Tofu!",
            "--identity", "post-1",
            "--store", str(store_dir),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "identity: post-1" in result.output
    assert f"author: {principal}" in result.output

    shown = runner.invoke(app, ["show", "--identity", "post-1", "--store", str(store_dir)])
    assert shown.exit_code == 0, shown.output
    assert "topic: veganism" in shown.output
    assert "content: Yay Tofu!" in shown.output


def test_post_rejects_long_topic(tmp_path: Path) -> None:
    key_path, _ = _keygen(tmp_path)
    store_dir = tmp_path / "records"

    result = runner.invoke(
        app,
        [
            "post",
            "--key", str(key_path),
            "--topic", "x" * 51,
            "--content", "Hummus, am I right?",
            "--identity", "post-1",
            "--store", str(store_dir),
        ],
    )

    assert result.exit_code == 1
    assert "The provided topic should be 50 characters long maximum." in result.output
    assert not ParquetRecordStore(store_dir).exists("post-1")


def test_store_directory_from_environment(tmp_path: Path) -> None:
    key_path, _ = _keygen(tmp_path)
    store_dir = tmp_path / "from-env"

    result = runner.invoke(
        app,
        ["post", "--key", str(key_path), "--content", "gm", "--identity", "post-1"],
        env={"POST_LEDGER_STORE": str(store_dir)},
    )

    assert result.exit_code == 0, result.output
    assert ParquetRecordStore(store_dir).fetch("post-1").content == "gm"


def test_show_missing_record(tmp_path: Path) -> None:
    store_dir = tmp_path / "records"
    result = runner.invoke(app, ["show", "--identity", "nope", "--store", str(store_dir)])

    assert result.exit_code == 1
    assert "no record under identity nope" in result.output
    assert not store_dir.exists()


def test_show_malformed_identity(tmp_path: Path) -> None:
    result = runner.invoke(app, ["show", "--identity", "../x", "--store", str(tmp_path)])

    assert result.exit_code == 1
    assert "error: Invalid record identity" in result.output


def test_post_malformed_identity(tmp_path: Path) -> None:
    key_path, _ = _keygen(tmp_path)
    store_dir = tmp_path / "records"

    result = runner.invoke(
        app,
        ["post", "--key", str(key_path), "--content", "gm", "--identity", "bad id", "--store", str(store_dir)],
    )

    assert result.exit_code == 1
    assert "error: Invalid record identity" in result.output
    assert not store_dir.exists()


def test_submit_command(tmp_path: Path) -> None:
    key_path, _ = _keygen(tmp_path)
    input_path = tmp_path / "posts.jsonl"
    input_path.write_text(
        json.dumps({"content": "gm"}) + "\n" + json.dumps({"content": "x" * 281}) + "\n",
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        ["submit", "--input", str(input_path), "--key", str(key_path), "--store", str(tmp_path / "records")],
    )

    assert result.exit_code == 0, result.output
    assert "total_read=2 total_written=1 total_rejected=1" in result.output
    assert "rejected ContentTooLong: 1" in result.output
