import click

from cli.cli_utils import echo_json, rpc_options, run_with_service


@click.command()
@click.option("-d", "--dao", "dao_name", required=True, type=str, help="DAO name or listing slug (case-insensitive).")
@click.option("-a", "--address", required=True, type=str, help="Account address to check.")
@rpc_options
def check_dao_member(
    dao_name: str, address: str, registry_file: str, provider_uri: str, max_workers: int, log_file: str
):
    """
    Checks whether an account holds the membership NFT of a DAO.
    """
    is_member = run_with_service(
        registry_file, provider_uri, max_workers, log_file, lambda service: service.is_member(dao_name, address)
    )
    echo_json({"dao": dao_name, "address": address, "is_member": is_member})
