"""CLI entrypoint for Corpus GPT."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import requests
import typer
import uvicorn

app = typer.Typer(name="cgpt", help="Corpus GPT command-line interface")

DEFAULT_HOST = "http://127.0.0.1:8000"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip('/')
    env_host = os.environ.get("CGPT_HOST")
    if env_host:
        return env_host.rstrip('/')
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    kwargs.setdefault("timeout", 300)
    resp = requests.request(method, url, **kwargs)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


@app.command()
def setup(
    index: Optional[str] = typer.Option(None, "--index", help="Index name"),
    path: Optional[list[Path]] = typer.Option(None, "--path", help="Corpus path (repeatable)"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Create the index if needed and load the corpus."""
    body: dict[str, object] = {}
    if index:
        body["index"] = index
    if path:
        body["paths"] = [str(item.expanduser().resolve()) for item in path]
    resp = _request("POST", "/setup", host=host, json=body)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def ingest(
    path: list[Path] = typer.Argument(..., help="Files or directories to ingest"),
    index: Optional[str] = typer.Option(None, "--index", help="Index name"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Ingest specific files or directories."""
    body: dict[str, object] = {"paths": [str(item.expanduser().resolve()) for item in path]}
    if index:
        body["index"] = index
    resp = _request("POST", "/ingest", host=host, json=body)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question to answer"),
    index: Optional[str] = typer.Option(None, "--index", help="Index name"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Ask a question and print the answer as it streams in."""
    body: dict[str, object] = {"question": question}
    if index:
        body["index"] = index
    resp = _request("POST", "/ask", host=host, json=body, stream=True)
    with resp:
        if resp.status_code == 204:
            typer.echo("No answer available: nothing in the corpus matched the question.", err=True)
            raise typer.Exit(code=2)
        try:
            for piece in resp.iter_content(chunk_size=None, decode_unicode=True):
                typer.echo(piece, nl=False)
        except (requests.exceptions.ChunkedEncodingError, requests.exceptions.ConnectionError) as exc:
            typer.echo()
            typer.echo(f"Answer stream broke off: {exc}", err=True)
            raise typer.Exit(code=3)
    typer.echo()


@app.command()
def serve(
    bind: str = typer.Option("127.0.0.1", "--bind", help="Interface to listen on"),
    port: int = typer.Option(8000, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API."""
    uvicorn.run("corpus_gpt.app:app", host=bind, port=port, reload=reload)


@app.command()
def indexes(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """List vector indexes."""
    resp = _request("GET", "/indexes", host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    app()
