import click

from cli.cli_utils import echo_json, rpc_options, run_with_service
from governance.mappers.membership_mapper import MembershipMapper
from governance.mappers.proposal_mapper import ProposalMapper
from governance.models.load_state import DaoDetailView, LoadResult


def _load_result_to_dict(result: LoadResult, serialize) -> dict:
    item = {"status": result.status}
    if result.is_success:
        item["data"] = serialize(result.data)
    elif result.is_error:
        item["error"] = result.error
        item["error_kind"] = result.error_kind
    return item


def detail_view_to_dict(view: DaoDetailView) -> dict:
    return {
        "dao": view.dao.model_dump(mode="json", exclude_none=True),
        "membership": _load_result_to_dict(view.membership, MembershipMapper.membership_to_dict),
        "proposals": _load_result_to_dict(view.proposals, ProposalMapper.proposals_to_dicts),
    }


@click.command()
@click.option("-d", "--dao", "dao_name", required=True, type=str, help="DAO name or listing slug (case-insensitive).")
@rpc_options
def get_dao_detail(dao_name: str, registry_file: str, provider_uri: str, max_workers: int, log_file: str):
    """
    Loads the detail page of a DAO: membership and proposals, each with its own status.
    """
    view = run_with_service(
        registry_file, provider_uri, max_workers, log_file, lambda service: service.load_detail(dao_name)
    )
    echo_json(detail_view_to_dict(view))
