import click

from cli.cli_utils import echo_json, rpc_options, run_with_service
from governance.mappers.proposal_mapper import ProposalMapper


@click.command()
@click.option("-d", "--dao", "dao_name", required=True, type=str, help="DAO name or listing slug (case-insensitive).")
@rpc_options
def get_dao_proposals(dao_name: str, registry_file: str, provider_uri: str, max_workers: int, log_file: str):
    """
    Reads the proposals of a DAO from ProposalCreated logs at its configured blocks.
    """
    proposals = run_with_service(
        registry_file, provider_uri, max_workers, log_file, lambda service: service.read_proposals(dao_name)
    )
    echo_json(ProposalMapper.proposals_to_dicts(proposals))
