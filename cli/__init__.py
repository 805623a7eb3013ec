import click

from cli.check_dao_member import check_dao_member
from cli.get_dao_detail import get_dao_detail
from cli.get_dao_members import get_dao_members
from cli.get_dao_proposals import get_dao_proposals
from cli.list_daos import list_daos


@click.group()
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx):
    pass


# Featured DAO listing
cli.add_command(list_daos, "list_daos")

# DAO detail page
cli.add_command(get_dao_detail, "get_dao_detail")

# Membership
cli.add_command(get_dao_members, "get_dao_members")
cli.add_command(check_dao_member, "check_dao_member")

# Proposals
cli.add_command(get_dao_proposals, "get_dao_proposals")
