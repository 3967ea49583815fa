"""CLI interface for pageserve.

Command-line tool for serving test pages over HTTPS during manual browser testing.
"""

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import click

from pageserve.config import PRESETS, Config
from pageserve.core.resolver import PathResolver, clean_path, contains_dot_dot
from pageserve.tls import TLSConfigError

LOG_FORMAT = "%(asctime)s %(message)s"


@click.group()
def cli() -> None:
    """pageserve - HTTPS file server for browser test pages."""


def _resolution_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by every command that resolves paths."""
    options = [
        click.option(
            "--config",
            "-c",
            "config_path",
            type=click.Path(exists=True, path_type=Path, dir_okay=False),
            default=None,
            help="Path to configuration file (default: auto-discover pageserve.toml)",
        ),
        click.option(
            "--root",
            "-r",
            "root_dir",
            type=click.Path(exists=True, path_type=Path, file_okay=False),
            default=None,
            help="Directory allow-listed files are served from (overrides config)",
        ),
        click.option(
            "--preset",
            type=click.Choice(sorted(PRESETS)),
            default=None,
            help="Use a built-in default document and allow-list (overrides config)",
        ),
        click.option(
            "--default-document",
            default=None,
            help="File served for / (overrides config)",
        ),
        click.option(
            "--allow",
            "allow",
            multiple=True,
            help="Filename served from the root as-is; repeatable (overrides config)",
        ),
        click.option(
            "--fallback-prefix",
            default=None,
            help='Prefix for every other path (overrides config, default: "../")',
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_config(
    config_path: Path | None,
    *,
    root_dir: Path | None = None,
    preset: str | None = None,
    default_document: str | None = None,
    allow: tuple[str, ...] = (),
    fallback_prefix: str | None = None,
    host: str | None = None,
    port: int | None = None,
    cert_file: Path | None = None,
    key_file: Path | None = None,
) -> Config:
    """Load configuration and apply CLI overrides, exiting on invalid config."""
    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    try:
        return config.with_overrides(
            host=host,
            port=port,
            cert_file=cert_file,
            key_file=key_file,
            root_dir=root_dir,
            preset=preset,
            default_document=default_document,
            allow_list=list(allow) if allow else None,
            fallback_prefix=fallback_prefix,
        )
    except ValueError as e:
        _fail(str(e))


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


@cli.command()
@_resolution_options
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config, default: 0.0.0.0)",
)
@click.option(
    "--port",
    "-p",
    type=click.IntRange(0, 65535),
    default=None,
    help="Port to bind to (overrides config, default: 8082)",
)
@click.option(
    "--cert",
    "cert_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="TLS certificate file (overrides config, default: server.crt)",
)
@click.option(
    "--key",
    "key_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="TLS private key file (overrides config, default: server.key)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    root_dir: Path | None,
    preset: str | None,
    default_document: str | None,
    allow: tuple[str, ...],
    fallback_prefix: str | None,
    host: str | None,
    port: int | None,
    cert_file: Path | None,
    key_file: Path | None,
    verbose: bool,
) -> None:
    """Start the HTTPS file server.

    Paths outside the allow-list are read relative to the fallback prefix,
    one directory above the root by default. There is no access control:
    use this for local testing only.
    """
    from pageserve.server import run_server

    config = _load_config(
        config_path,
        root_dir=root_dir,
        preset=preset,
        default_document=default_document,
        allow=allow,
        fallback_prefix=fallback_prefix,
        host=host,
        port=port,
        cert_file=cert_file,
        key_file=key_file,
    )

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    files = config.files
    click.echo(f"Starting server on https://{config.server.host}:{config.server.port}")
    if config.config_path is not None:
        click.echo(f"Config file: {config.config_path}")
    else:
        click.echo("Config file: none (defaults)")
    click.echo(f"Certificate: {config.server.cert_file}")
    click.echo(f"Private key: {config.server.key_file}")
    click.echo(f"Root directory: {files.root_dir}")
    click.echo(f"Default document: {files.default_document}")
    if files.allow_list:
        click.echo(f"Allow-list: {', '.join(files.allow_list)}")
    else:
        click.echo("Allow-list: empty")
    click.echo(f'Fallback prefix: "{files.fallback_prefix}"')

    try:
        run_server(config)
    except TLSConfigError as e:
        _fail(str(e))
    except OSError as e:
        _fail(f"Server failed: {e}")


@cli.command()
@click.argument("url_paths", nargs=-1, required=True)
@_resolution_options
def resolve(
    url_paths: tuple[str, ...],
    config_path: Path | None,
    root_dir: Path | None,
    preset: str | None,
    default_document: str | None,
    allow: tuple[str, ...],
    fallback_prefix: str | None,
) -> None:
    """Show which file each URL path would be served from.

    Paths the server would redirect or refuse are reported as such.
    """
    config = _load_config(
        config_path,
        root_dir=root_dir,
        preset=preset,
        default_document=default_document,
        allow=allow,
        fallback_prefix=fallback_prefix,
    )
    resolver = PathResolver.from_config(config.files)

    for url_path in url_paths:
        if not url_path.startswith("/"):
            url_path = f"/{url_path}"
        cleaned = clean_path(url_path)
        if cleaned != url_path:
            click.echo(f"{url_path} -> redirect to {cleaned}")
            url_path = cleaned
        if contains_dot_dot(url_path):
            click.echo(f"{url_path} -> invalid URL path")
            continue
        file_path = resolver.resolve(url_path)
        click.echo(f"{url_path} -> {config.files.root_dir / file_path}")


@cli.command()
def presets() -> None:
    """List built-in presets."""
    for name in sorted(PRESETS):
        preset = PRESETS[name]
        click.echo(click.style(name, bold=True))
        click.echo(f"  Default document: {preset.default_document}")
        if preset.allow_list:
            click.echo(f"  Allow-list: {', '.join(preset.allow_list)}")
        else:
            click.echo("  Allow-list: empty")
        click.echo(f'  Fallback prefix: "{preset.fallback_prefix}"')


if __name__ == "__main__":
    cli()
