from __future__ import annotations

import typer

from post_ledger.auth.keys import Keypair, new_identity, sign_post
from post_ledger.errors import PostError
from post_ledger.handler import create_record
from post_ledger.store.base import check_identity
from post_ledger.store.parquet import ParquetRecordStore
from post_ledger.submit import submit_posts


DEFAULT_STORE_DIR = "data/records"
STORE_ENV_VAR = "POST_LEDGER_STORE"

app = typer.Typer(help="Append-only store for short signed posts.")


def _store_option():
    return typer.Option(
        DEFAULT_STORE_DIR, "--store", envvar=STORE_ENV_VAR, help="Record store directory."
    )


def _fail(exc: PostError) -> None:
    typer.echo(f"error: {exc.kind}: {exc.msg}", err=True)
    raise typer.Exit(code=1)


def _fail_invalid(exc: ValueError) -> None:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command("keygen")
def keygen_command(
    out: str = typer.Option(..., "--out", help="Path of the PEM key file to write."),
) -> None:
    keypair = Keypair.generate()
    keypair.save(out)
    typer.echo(f"principal: {keypair.principal}")


@app.command("post")
def post_command(
    key: str = typer.Option(..., "--key", help="PEM key file of the author."),
    content: str = typer.Option(..., "--content", help="Post content."),
    topic: str = typer.Option("", "--topic", help="Optional topic."),
    identity: str | None = typer.Option(None, "--identity", help="Record identity to use."),
    store: str = _store_option(),
) -> None:
    keypair = Keypair.load(key)
    identity = identity or new_identity()
    try:
        check_identity(identity)
        signature = sign_post(keypair, identity, topic, content)
        record = create_record(
            ParquetRecordStore(store), topic, content, identity, keypair.principal, signature
        )
    except PostError as exc:
        _fail(exc)
    except ValueError as exc:
        _fail_invalid(exc)

    typer.echo(f"identity: {identity}")
    typer.echo(f"author: {record.author}")
    typer.echo(f"created_at: {record.created_at}")


@app.command("show")
def show_command(
    identity: str = typer.Option(..., "--identity", help="Record identity to fetch."),
    store: str = _store_option(),
) -> None:
    try:
        record = ParquetRecordStore(store).fetch(identity)
    except ValueError as exc:
        _fail_invalid(exc)
    except KeyError:
        typer.echo(f"error: no record under identity {identity}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"author: {record.author}")
    typer.echo(f"topic: {record.topic}")
    typer.echo(f"content: {record.content}")
    typer.echo(f"created_at: {record.created_at}")


@app.command("submit")
def submit_command(
    input: str = typer.Option(..., "--input", help="Path to JSONL or CSV file."),
    key: str = typer.Option(..., "--key", help="PEM key file of the author."),
    store: str = _store_option(),
    max_rows: int | None = typer.Option(None, "--max-rows", help="Max rows to submit."),
) -> None:
    summary = submit_posts(input, ParquetRecordStore(store), Keypair.load(key), max_rows=max_rows)
    for kind, count in sorted(summary["rejected_by_kind"].items()):
        typer.echo(f"rejected {kind}: {count}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
