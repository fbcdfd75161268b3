"""CLI entry point for hostwait."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from .__about__ import __version__
from .config import LOG_FORMATS, WaitConfig
from .logging_config import configure_logging
from .targets import Target, TargetFormatError, parse_targets
from .waiter import LoggingEvents, TargetStatus, Waiter, WaitEvents, WaitSession, wait_for_all

logger = logging.getLogger("hostwait")


def _load_wait_env(env_file: Optional[str]) -> None:
    """Populate WAIT* variables from ``env_file``, or from ./.env when present."""

    path = Path(env_file) if env_file else Path.cwd() / ".env"
    if path.is_file():
        load_dotenv(path)
    elif env_file:
        raise click.BadParameter(f"cannot read WAIT settings from {env_file}: no such file", param_hint="--env-file")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("targets", required=False)
@click.option("--timeout", type=int, default=None, help="Timeout in seconds (WAIT_TIMEOUT, else 15)")
@click.option("--retry-interval", type=int, default=None, help="Retry interval in seconds (WAIT_RETRY_INTERVAL, else 1)")
@click.option("-q", "--quiet", is_flag=True, help="Only report warnings and errors")
@click.option("-d", "--debug", is_flag=True, help="Report every probe")
@click.option(
    "--format",
    "log_format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    default=None,
    help="Log format (WAIT_LOG_FORMAT, else text)",
)
@click.option("--env-file", type=str, help="Path to a .env file to load before reading WAIT* variables")
@click.version_option(__version__, prog_name="hostwait")
@click.pass_context
def cli(
    ctx: click.Context,
    targets: Optional[str],
    timeout: Optional[int],
    retry_interval: Optional[int],
    quiet: bool,
    debug: bool,
    log_format: Optional[str],
    env_file: Optional[str],
) -> None:
    """Wait until every HOST:PORT in TARGETS accepts TCP connections.

    TARGETS is a comma-separated list such as db:5432,cache:6379. When it
    is omitted the WAIT environment variable is used instead. Exits 0 once all
    targets are reachable and 1 if the timeout is reached first.
    """

    _load_wait_env(env_file)
    try:
        config = WaitConfig.from_env().merged(
            targets=targets,
            timeout=timeout,
            retry_interval=retry_interval,
            log_format=log_format,
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    configure_logging(quiet=quiet, debug=debug, log_format=config.log_format)

    if not config.targets:
        click.echo(ctx.get_help())
        ctx.exit(1)

    try:
        hosts = parse_targets(config.targets)
    except TargetFormatError as exc:
        logger.error("Invalid format for host:port", extra={"input": exc.pair})
        ctx.exit(1)

    logger.debug(
        "Waiting for hosts",
        extra={
            "targets": [target.address for target in hosts],
            "timeout": config.timeout,
            "retry_interval": config.retry_interval,
        },
    )
    if not wait_for_all(hosts, config.timeout, config.retry_interval):
        ctx.exit(1)


__all__ = [
    "cli",
    "__version__",
    "LoggingEvents",
    "Target",
    "TargetFormatError",
    "TargetStatus",
    "WaitConfig",
    "WaitEvents",
    "WaitSession",
    "Waiter",
    "parse_targets",
    "wait_for_all",
]
