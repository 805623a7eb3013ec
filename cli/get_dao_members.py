import click

from cli.cli_utils import echo_json, rpc_options, run_with_service
from governance.mappers.membership_mapper import MembershipMapper


@click.command()
@click.option("-d", "--dao", "dao_name", required=True, type=str, help="DAO name or listing slug (case-insensitive).")
@rpc_options
def get_dao_members(dao_name: str, registry_file: str, provider_uri: str, max_workers: int, log_file: str):
    """
    Resolves the members of a DAO from the holders of its membership NFT.
    """
    membership = run_with_service(
        registry_file, provider_uri, max_workers, log_file, lambda service: service.resolve_membership(dao_name)
    )
    echo_json(MembershipMapper.membership_to_dict(membership))
