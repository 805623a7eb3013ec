import click

from cli.cli_utils import echo_json, load_registry, registry_option
from config.settings import settings
from utils.logger_utils import configure_logging


@click.command()
@registry_option
@click.option("--all", "include_all", is_flag=True, default=False, help="Include DAOs not flagged as featured.")
def list_daos(registry_file: str, include_all: bool):
    """
    Prints the featured DAOs of the registry.
    """
    configure_logging(log_level=settings.app.log_level)
    registry = load_registry(registry_file)
    records = list(registry) if include_all else registry.list_featured()
    echo_json(
        [
            {
                "name": record.name,
                "href": record.href,
                "description": record.description,
                "category": record.category,
                "treasury_size": record.treasury_size,
                "networks": list(record.networks),
                "cross_chain": record.cross_chain,
            }
            for record in records
        ]
    )
