import asyncio
from typing import Any, Awaitable, Callable, Optional

import click
import orjson

from config.settings import settings
from governance.service.dao_page_service import DaoPageService
from governance.service.dao_registry import DaoRegistry
from utils.exceptions import DaoReaderError
from utils.logger_utils import configure_logging, get_logger

logger = get_logger("CLI")


def registry_option(func):
    return click.option(
        "-r",
        "--registry-file",
        default=settings.registry.file,
        show_default=True,
        type=str,
        help="Path to the JSON DAO registry.",
    )(func)


def rpc_options(func):
    func = click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")(func)
    func = click.option(
        "-w",
        "--max-workers",
        default=settings.ethereum.max_workers,
        show_default=True,
        type=int,
        help="Maximum number of concurrent ownerOf / event-log requests.",
    )(func)
    func = click.option(
        "-p",
        "--provider-uri",
        default=None,
        type=str,
        help="JSON-RPC endpoint to use instead of the one configured for the DAO's network.",
    )(func)
    func = registry_option(func)
    return func


def echo_json(data: Any) -> None:
    click.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))


def load_registry(registry_file: str) -> DaoRegistry:
    try:
        return DaoRegistry.from_file(registry_file)
    except DaoReaderError as e:
        raise click.ClickException(e.message) from e


def run_with_service(
    registry_file: str,
    provider_uri: Optional[str],
    max_workers: int,
    log_file: Optional[str],
    action: Callable[[DaoPageService], Awaitable[Any]],
) -> Any:
    """Builds the page service, runs `action` on it and closes its connections."""
    configure_logging(log_file, settings.app.log_level)
    registry = load_registry(registry_file)

    async def run() -> Any:
        async with DaoPageService.from_settings(
            settings, registry=registry, provider_uri_override=provider_uri, max_workers=max_workers
        ) as service:
            return await action(service)

    try:
        return asyncio.run(run())
    except DaoReaderError as e:
        logger.error(f"{e.kind}: {e.message}")
        raise click.ClickException(f"{e.kind}: {e.message}") from e
