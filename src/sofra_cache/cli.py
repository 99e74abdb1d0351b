from __future__ import annotations

import asyncio
import json
import logging
import typing as t

import click

from .cache.store import CacheStore, ttl_seconds
from .errors import StorageError
from .storage.factory import build_backend
from .utils.config import SofraCacheConfig

T = t.TypeVar("T")


def _run(store: CacheStore, fn: t.Callable[[CacheStore], t.Awaitable[T]]) -> T:
    async def _main() -> T:
        try:
            return await fn(store)
        finally:
            await store.close()

    try:
        return asyncio.run(_main())
    except StorageError as exc:
        raise click.ClickException(f"storage error: {exc}") from exc


@click.group()
@click.option("--backend", type=click.Choice(["memory", "file", "redis"]), default=None, help="Storage backend")
@click.option("--path", default=None, help="Directory for the file backend")
@click.option("--url", default=None, help="Redis URL for the redis backend")
@click.option("--prefix", default=None, help="Key prefix for the redis backend")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def main(
    ctx: click.Context,
    backend: t.Optional[str],
    path: t.Optional[str],
    url: t.Optional[str],
    prefix: t.Optional[str],
    verbose: bool,
) -> None:
    """Inspect and edit a sofra-cache store."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = SofraCacheConfig.from_env()
    if backend:
        config.storage.type = backend
    if path:
        config.storage.path = path
    if url:
        config.storage.connection_string = url
    if prefix:
        config.storage.prefix = prefix
    try:
        storage = build_backend(config.storage)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    ctx.obj = CacheStore(storage, delete_expired=config.cache.delete_expired)


@main.command("get")
@click.argument("key")
@click.pass_obj
def get_cmd(store: CacheStore, key: str) -> None:
    """Print the value for KEY if it has not expired."""
    missing = object()
    value = _run(store, lambda s: s.get(key, missing))
    if value is missing:
        raise click.ClickException(f"{key}: not cached")
    click.echo(json.dumps(value, ensure_ascii=False))


@main.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--ttl", type=float, default=300.0, show_default=True, help="Time to live in seconds")
@click.pass_obj
def set_cmd(store: CacheStore, key: str, value: str, ttl: float) -> None:
    """Store VALUE (a JSON document) under KEY."""
    try:
        payload = json.loads(value)
    except ValueError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="VALUE") from exc
    try:
        ttl = ttl_seconds(ttl)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--ttl") from exc
    _run(store, lambda s: s.set(key, payload, ttl))
    click.echo(f"{key}: stored for {ttl:g}s")


@main.command("remove")
@click.argument("key")
@click.pass_obj
def remove_cmd(store: CacheStore, key: str) -> None:
    """Delete KEY."""
    _run(store, lambda s: s.remove(key))
    click.echo(f"{key}: removed")


@main.command("inspect")
@click.argument("key")
@click.pass_obj
def inspect_cmd(store: CacheStore, key: str) -> None:
    """Show the raw entry for KEY, expired or not."""
    entry = _run(store, lambda s: s.get_entry(key))
    if entry is None:
        raise click.ClickException(f"{key}: no entry")
    now = store.now()
    state = "valid" if entry.is_valid(now) else "expired"
    click.echo(
        json.dumps(
            {
                "key": entry.key,
                "state": state,
                "expires_at": entry.expires_at,
                "remaining_seconds": round(entry.remaining(now), 3),
                "value": entry.value,
            },
            ensure_ascii=False,
        )
    )


@main.command("purge")
@click.pass_obj
def purge_cmd(store: CacheStore) -> None:
    """Delete every expired entry."""
    removed = _run(store, lambda s: s.purge_expired())
    click.echo(f"purged {removed} expired entries")


@main.command("clear-pattern")
@click.argument("pattern")
@click.pass_obj
def clear_pattern_cmd(store: CacheStore, pattern: str) -> None:
    """Delete every entry whose key contains PATTERN."""
    removed = _run(store, lambda s: s.clear_by_pattern(pattern))
    click.echo(f"cleared {removed} entries matching {pattern!r}")


@main.command("clear")
@click.confirmation_option(prompt="Delete every cached entry?")
@click.pass_obj
def clear_cmd(store: CacheStore) -> None:
    """Delete every entry."""
    removed = _run(store, lambda s: s.clear())
    click.echo(f"cleared {removed} entries")


if __name__ == "__main__":
    main()
