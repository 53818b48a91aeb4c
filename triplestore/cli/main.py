import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import click

from triplestore.core.config import load_config, open_store
from triplestore.core.errors import TriplestoreError
from triplestore.core.store import Triplestore


# -------------------------
# Helpers
# -------------------------


def _parse_prefixes(values: Iterable[str]) -> Dict[str, str]:
    # foaf=http://xmlns.com/foaf/0.1/ -> {"foaf": "http://xmlns.com/foaf/0.1/"}
    prefixes: Dict[str, str] = {}
    for item in values:
        name, sep, iri = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=IRI, got {item!r}", param_hint="--prefix")
        prefixes[name] = iri
    return prefixes


def _emit(items: List[str], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(items))
        return
    for item in items:
        click.echo(item)


def _store(ctx: click.Context) -> Triplestore:
    return ctx.obj["store"]


def _fail(ctx: click.Context, error: TriplestoreError) -> None:
    store = _store(ctx)
    if store.logger:
        store.logger.log_error(
            type(error).__name__,
            subject=getattr(error, "subject", None),
            details={"message": str(error)},
        )
    raise click.ClickException(str(error))


# -------------------------
# CLI
# -------------------------


@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Path to triplestore.yaml")
@click.option("--backend", type=click.Choice(["memory", "json", "sqlite"]), default=None, help="Override storage backend")
@click.option("--db", type=click.Path(path_type=Path), default=None, help="Override store file path")
@click.option("--log-db", type=click.Path(path_type=Path), default=None, help="Enable the write log at this path")
@click.option("--prefix", "prefixes", multiple=True, help="Prefix binding NAME=IRI (repeatable)")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    backend: Optional[str],
    db: Optional[Path],
    log_db: Optional[Path],
    prefixes: Tuple[str, ...],
) -> None:
    """triplestore CLI.

    Store and query subject/property/object triples. Identifiers may be
    written as CURIEs (foaf:name) once their prefix is bound.
    """
    overrides: Dict[str, Dict] = {}
    if backend:
        overrides.setdefault("storage", {})["backend"] = backend
    if db:
        overrides.setdefault("storage", {})["path"] = str(db)
    if log_db:
        overrides["logging"] = {"enabled": True, "path": str(log_db)}
    if prefixes:
        overrides["prefixes"] = _parse_prefixes(prefixes)

    config = load_config(config_path, cli_overrides=overrides or None)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["store"] = open_store(config)


# ---- mutations ----


@cli.command("push")
@click.argument("subject")
@click.argument("property")
@click.argument("object")
@click.pass_context
def push(ctx: click.Context, subject: str, property: str, object: str) -> None:
    """Store a triple (replaces any previous object for the property)."""
    try:
        _store(ctx).push(subject, property, object)
    except TriplestoreError as e:
        _fail(ctx, e)


@cli.command("remove")
@click.option("--subject", default=None, help="Subject to remove from")
@click.option("--property", "property_", default=None, help="Property to remove")
@click.option("--yes", is_flag=True, help="Do not ask before clearing the whole store")
@click.pass_context
def remove(ctx: click.Context, subject: Optional[str], property_: Optional[str], yes: bool) -> None:
    """Remove a property, a subject, a property everywhere, or everything.

    With neither --subject nor --property the whole store is cleared.
    """
    if not subject and not property_ and not yes:
        click.confirm("Clear every triple in the store?", abort=True)

    try:
        _store(ctx).remove(subject, property_)
    except TriplestoreError as e:
        _fail(ctx, e)


# ---- queries ----


@cli.command("subjects")
@click.option("--property", "property_", default=None, help="Only subjects having this property")
@click.option("--value", default=None, help="Only subjects with this value")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array")
@click.pass_context
def subjects(ctx: click.Context, property_: Optional[str], value: Optional[str], as_json: bool) -> None:
    """List subjects."""
    try:
        _emit(_store(ctx).get_subjects(property_, value), as_json)
    except TriplestoreError as e:
        _fail(ctx, e)


@cli.command("properties")
@click.option("--subject", default=None, help="Only properties of this subject")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array")
@click.pass_context
def properties(ctx: click.Context, subject: Optional[str], as_json: bool) -> None:
    """List properties."""
    try:
        _emit(_store(ctx).get_properties(subject), as_json)
    except TriplestoreError as e:
        _fail(ctx, e)


@cli.command("values")
@click.option("--subject", default=None, help="Only values of this subject")
@click.option("--property", "property_", default=None, help="Only values of this property")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array")
@click.pass_context
def values(ctx: click.Context, subject: Optional[str], property_: Optional[str], as_json: bool) -> None:
    """List object values."""
    try:
        _emit(_store(ctx).get_values(subject, property_), as_json)
    except TriplestoreError as e:
        _fail(ctx, e)


@cli.command("show")
@click.pass_context
def show(ctx: click.Context) -> None:
    """Print every stored record."""
    _store(ctx).show()


# ---- log commands ----


@cli.group()
def log() -> None:
    """Write log (summary)."""


@log.command("summary")
@click.option("--session", default=None, help="Session ID (defaults to the most recent session)")
@click.pass_context
def log_summary(ctx: click.Context, session: Optional[str]) -> None:
    logger = _store(ctx).logger
    if logger is None:
        raise click.ClickException("Write log is not enabled (use --log-db or logging.enabled)")

    summary = logger.get_session_summary(session or logger.latest_session())
    click.echo(json.dumps(summary, indent=2))


if __name__ == "__main__":
    cli()
