"""Command-line interface for acdiscovery.

Example:
    >>> # From terminal:
    >>> # acdiscovery --version
    >>> # acdiscovery discover example.com/myapp:1.0.0
    >>> # acdiscovery discover --json --tag latest example.com/myapp
    >>> # acdiscovery discover --insecure --header example.com="Authorization: Bearer t" example.com/myapp
"""

import asyncio
import json
import platform
from typing import Annotated, Optional

import typer

from acdiscovery import __version__
from acdiscovery.discovery.http import DiscoveryFetcher
from acdiscovery.discovery.resolver import Resolution, resolve_app
from acdiscovery.errors import ACDiscoveryError
from acdiscovery.models.app import App
from acdiscovery.models.constants import ARCH_LABEL, OS_LABEL
from acdiscovery.models.entities import FailedAttempt
from acdiscovery.models.enums import DiscoveryKind, InsecureOption
from acdiscovery.observability import bind_context, configure_logging

app = typer.Typer(help="App Container meta discovery CLI.")

# platform.machine() values mapped to App Container arch label values
_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "i386",
    "i686": "i386",
    "arm64": "aarch64",
    "aarch64": "aarch64",
}

_WALK_NAMES = {
    DiscoveryKind.IMAGE_TAGS: "tags",
    DiscoveryKind.ACI_ENDPOINTS: "endpoints",
    DiscoveryKind.PUBLIC_KEYS: "public keys",
}


def default_os() -> str:
    """Return the os label value for the running platform."""
    return platform.system().lower()


def default_arch() -> str:
    """Return the arch label value for the running platform."""
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


def _parse_host_headers(values: list[str]) -> dict[str, dict[str, str]]:
    """Parse ``host=Name: value`` options into a per-host header mapping."""
    headers: dict[str, dict[str, str]] = {}
    for raw in values:
        host, sep, header = raw.partition("=")
        name, colon, value = header.partition(":")
        if not sep or not colon or not host.strip() or not name.strip():
            raise typer.BadParameter(f"Expected HOST=Name: value, got {raw!r}")
        headers.setdefault(host.strip(), {})[name.strip()] = value.strip()
    return headers


def _echo_attempts(resolution: Resolution, to_stderr: bool) -> None:
    for kind, attempts in resolution.attempts.items():
        _echo_walk(kind, attempts, to_stderr)


def _echo_walk(kind: DiscoveryKind, attempts: list[FailedAttempt], to_stderr: bool) -> None:
    for attempt in attempts:
        typer.echo(
            f"discover {_WALK_NAMES[kind]} walk: prefix: {attempt.prefix} error: {attempt.error}",
            err=to_stderr,
        )


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


VERSION_OPTION = typer.Option(
    False,
    "--version",
    help="Show acdiscovery version and exit.",
    callback=_version_callback,
    is_eager=True,
)


@app.callback()
def cli(
    version: bool = VERSION_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """acdiscovery CLI entrypoint."""
    configure_logging(log_level="DEBUG" if verbose else None, force=verbose)


@app.command("discover")
def discover(
    names: Annotated[
        list[str],
        typer.Argument(help="Apps to discover, e.g. example.com/myapp:1.0.0,channel=alpha."),
    ],
    output_json: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON."),
    ] = False,
    insecure: Annotated[
        bool,
        typer.Option(
            "--insecure",
            help="Don't check TLS certificates and allow insecure non-TLS downloads over http.",
        ),
    ] = False,
    tag: Annotated[
        Optional[str],
        typer.Option("--tag", "-t", help="Tag to resolve into labels (e.g. latest)."),
    ] = None,
    header: Annotated[
        Optional[list[str]],
        typer.Option("--header", "-H", help="Per-host request header as HOST=Name: value."),
    ] = None,
) -> None:
    """Discover the download URLs for one or more app container images."""
    insecure_option = InsecureOption.ALL if insecure else InsecureOption.NONE
    fetcher = DiscoveryFetcher(host_headers=_parse_host_headers(header or []))

    for name in names:
        bind_context(app=name)
        try:
            parsed = App.from_string(name)
        except ACDiscoveryError as e:
            typer.echo(f"{name}: {e.message}", err=True)
            raise typer.Exit(1) from e

        labels = dict(parsed.labels)
        labels.setdefault(OS_LABEL, default_os())
        labels.setdefault(ARCH_LABEL, default_arch())

        try:
            resolution = asyncio.run(
                resolve_app(
                    parsed.with_labels(labels),
                    tag=tag,
                    insecure=insecure_option,
                    fetcher=fetcher,
                )
            )
        except ACDiscoveryError as e:
            typer.echo(f"error discovering {name}: {e.message}", err=True)
            for attempt in getattr(e, "attempts", []):
                typer.echo(f"  prefix: {attempt.prefix} error: {attempt.error}", err=True)
            raise typer.Exit(1) from e

        _echo_attempts(resolution, to_stderr=output_json)

        if output_json:
            data = {
                "name": resolution.app.name,
                "labels": resolution.app.labels,
                "aci_endpoints": [ep.model_dump() for ep in resolution.aci_endpoints],
                "public_keys": resolution.public_keys,
            }
            typer.echo(json.dumps(data, indent=4))
            continue

        if tag and resolution.image_tags_endpoint is None:
            typer.echo("no discover tags found")
        for endpoint in resolution.aci_endpoints:
            typer.echo(f"ACI: {endpoint.aci}, ASC: {endpoint.asc}")
        if resolution.public_keys:
            typer.echo("PublicKeys: " + ",".join(resolution.public_keys))
