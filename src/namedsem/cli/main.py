"""Command-line interface for namedsem.

Provides commands for posting to and waiting on named semaphores from
shell scripts and other processes.
"""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from pathlib import Path
from typing import Any, TypeVar

import click
import structlog

from namedsem import __version__
from namedsem.backplane import libc
from namedsem.backplane.semaphore import NamedSemaphore
from namedsem.core.config import SemaphoreConfig
from namedsem.core.errors import SemaphoreError, SemaphoreOSError

log = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


def _configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure structlog with appropriate log level filtering."""
    import logging

    if quiet:
        min_level = logging.WARNING
    elif verbose:
        min_level = logging.DEBUG
    else:
        min_level = logging.INFO

    def _filter_by_level(
        _logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        if getattr(logging, method_name.upper(), 0) < min_level:
            raise structlog.DropEvent
        return event_dict

    structlog.configure(
        processors=[
            _filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=True),
        ],
    )


def _semaphore_options(func: F) -> F:
    """Attach the options shared by post and wait."""
    options = [
        click.argument("name", required=False),
        click.option(
            "--config",
            "-c",
            "config_path",
            type=click.Path(exists=True, path_type=Path),
            default=None,
            help="YAML semaphore configuration (replaces NAME and open options)",
        ),
        click.option("--create", is_flag=True, help="Create the semaphore if missing"),
        click.option(
            "--exclusive", is_flag=True, help="With --create, fail if the semaphore exists"
        ),
        click.option("--mode", "-m", default="600", help="Octal permission bits on creation"),
        click.option(
            "--initial",
            "-i",
            type=click.IntRange(min=0),
            default=0,
            help="Initial count on creation",
        ),
        click.option(
            "--count",
            "-n",
            type=click.IntRange(min=1),
            default=1,
            help="Number of times to repeat the operation",
        ),
        click.option("--verbose", "-v", is_flag=True, help="Enable verbose output"),
        click.option("--quiet", "-q", is_flag=True, help="Suppress progress output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_config(
    name: str | None,
    config_path: Path | None,
    create: bool,
    exclusive: bool,
    mode: str,
    initial: int,
) -> SemaphoreConfig:
    """Build the semaphore configuration from a file or the command line."""
    if config_path is not None:
        if name is not None:
            raise click.UsageError("NAME and --config are mutually exclusive")
        return SemaphoreConfig.from_yaml(config_path)
    if name is None:
        raise click.UsageError("NAME is required unless --config is given")
    return SemaphoreConfig(
        name=name,
        create=create,
        exclusive=exclusive,
        mode=mode,
        initial=initial,
    )


def _run(
    action: str,
    config: SemaphoreConfig,
    count: int,
    operation: Callable[[NamedSemaphore], None],
) -> None:
    """Open the semaphore and apply ``operation`` ``count`` times."""
    try:
        with config.open() as sem:
            for i in range(count):
                operation(sem)
                log.debug(action.capitalize(), name=sem.name, n=i + 1)
        log.info(f"{action.capitalize()} complete", name=config.name, count=count)
    except KeyboardInterrupt as e:
        log.info("Interrupted by user")
        raise SystemExit(130) from e
    except SemaphoreOSError as e:
        log.error(
            f"{action.capitalize()} failed",
            name=config.name,
            operation=e.operation,
            errno=e.errno,
            error=e.strerror,
        )
        raise SystemExit(1) from e
    except SemaphoreError as e:
        log.error(f"{action.capitalize()} failed", name=config.name, error=str(e))
        raise SystemExit(1) from e


def _load(**kwargs: Any) -> SemaphoreConfig:
    try:
        return _resolve_config(**kwargs)
    except click.UsageError:
        raise
    except Exception as e:
        log.error("Configuration invalid", error=str(e))
        raise SystemExit(1) from e


@click.group()
@click.version_option(version=__version__, prog_name="namedsem")
def cli() -> None:
    """namedsem - Named POSIX semaphores.

    Post to and wait on kernel semaphores shared between processes.
    """


@cli.command()
@_semaphore_options
def post(
    name: str | None,
    config_path: Path | None,
    create: bool,
    exclusive: bool,
    mode: str,
    initial: int,
    count: int,
    verbose: bool,
    quiet: bool,
) -> None:
    """Increment a named semaphore.

    NAME: Semaphore name (e.g., /my_sem)
    """
    _configure_logging(verbose=verbose, quiet=quiet)
    config = _load(
        name=name,
        config_path=config_path,
        create=create,
        exclusive=exclusive,
        mode=mode,
        initial=initial,
    )
    _run("post", config, count, NamedSemaphore.post)


@cli.command()
@_semaphore_options
def wait(
    name: str | None,
    config_path: Path | None,
    create: bool,
    exclusive: bool,
    mode: str,
    initial: int,
    count: int,
    verbose: bool,
    quiet: bool,
) -> None:
    """Decrement a named semaphore, blocking while its count is zero.

    NAME: Semaphore name (e.g., /my_sem)
    """
    _configure_logging(verbose=verbose, quiet=quiet)
    config = _load(
        name=name,
        config_path=config_path,
        create=create,
        exclusive=exclusive,
        mode=mode,
        initial=initial,
    )
    _run("wait", config, count, NamedSemaphore.wait)


@cli.command()
@click.argument("config_path", type=click.Path(exists=True, path_type=Path))
def validate(config_path: Path) -> None:
    """Validate semaphore configuration file.

    CONFIG_PATH: Path to YAML configuration file

    Exits with code 0 if valid, 1 if invalid.
    """
    try:
        config = SemaphoreConfig.from_yaml(config_path)
    except Exception as e:
        log.error("Configuration invalid", error=str(e))
        raise SystemExit(1) from e

    log.info("Configuration valid", name=config.name)
    click.echo(f"  Name: {config.name}")
    click.echo(f"  Options: {config.options.name}")
    click.echo(f"  Mode: {config.mode:#o}")
    click.echo(f"  Initial: {config.initial}")


@cli.command()
def info() -> None:
    """Show platform limits for named semaphores."""
    try:
        library = libc.library_name()
    except OSError as e:
        log.error("Semaphore API unavailable", error=str(e))
        raise SystemExit(1) from e

    click.echo(f"C library: {library}")
    click.echo(f"SEM_VALUE_MAX: {libc.sem_value_max()}")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
