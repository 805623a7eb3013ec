import asyncio
from pathlib import Path

import pytest

from governance.models.load_state import LoadStatus
from governance.service.dao_page_service import DaoPageService
from governance.service.dao_registry import DaoRegistry
from utils.exceptions import DaoNotFoundError, NetworkNotConfiguredError


def make_service(registry, connection, provider_uris=None, **kwargs):
    opened = []

    def connection_factory(uri, timeout):
        opened.append((uri, timeout))
        return connection

    service = DaoPageService(
        registry,
        provider_uris if provider_uris is not None else {10: "https://optimism.example"},
        connection_factory=connection_factory,
        **kwargs,
    )
    return service, opened


@pytest.mark.asyncio
async def test_load_detail_success(fake_connection, fake_token, fake_governor, proposal_event, dao_record, addresses):
    dao = dao_record(proposal_blocks=[100])
    connection = fake_connection(
        governor=fake_governor(events_by_block={100: [proposal_event(9, addresses.member_a, "Hello", 100)]}),
        token=fake_token(owners=[addresses.member_a, addresses.member_b]),
    )
    service, opened = make_service(DaoRegistry([dao]), connection, rpc_timeout=7)

    view = await service.load_detail("w3hc")

    assert view.dao == dao
    assert view.membership.status == LoadStatus.SUCCESS
    assert view.membership.data.members == frozenset({addresses.member_a, addresses.member_b})
    assert view.proposals.status == LoadStatus.SUCCESS
    assert [proposal.proposal_id for proposal in view.proposals.data] == ["9"]
    # One connection per chain, shared by both reads
    assert opened == [("https://optimism.example", 7)]


@pytest.mark.asyncio
async def test_load_detail_captures_errors_per_section(fake_connection, fake_token, dao_record, addresses):
    dao = dao_record(proposal_blocks=[])
    connection = fake_connection(token=fake_token(owners=[addresses.member_a], failing_token_ids={0}))
    service, _ = make_service(DaoRegistry([dao]), connection)

    view = await service.load_detail("W3HC")

    assert view.membership.status == LoadStatus.ERROR
    assert view.membership.error_kind == "MembershipFetchError"
    assert view.membership.data is None
    assert view.proposals.status == LoadStatus.SUCCESS
    assert view.proposals.data == []


@pytest.mark.asyncio
async def test_load_detail_invalid_address(fake_connection, dao_record):
    dao = dao_record(address="0xdeadbeef", proposal_blocks=[1])
    connection = fake_connection()
    service, _ = make_service(DaoRegistry([dao]), connection)

    view = await service.load_detail("w3hc")

    assert view.membership.error_kind == "InvalidAddress"
    assert view.proposals.error_kind == "InvalidAddress"
    assert connection.call_count == 0


@pytest.mark.asyncio
async def test_unknown_dao_raises_not_found(fake_connection, dao_record):
    service, opened = make_service(DaoRegistry([dao_record()]), fake_connection())

    with pytest.raises(DaoNotFoundError):
        await service.load_detail("Your DAO?")
    with pytest.raises(DaoNotFoundError):
        await service.resolve_membership("unknown")
    assert opened == []


@pytest.mark.asyncio
async def test_network_selection(fake_connection, dao_record):
    dao = dao_record(networks=[11155111, 10], cross_chain=True)
    service, opened = make_service(
        DaoRegistry([dao]), fake_connection(), provider_uris={10: "https://op.example", 1: "https://eth.example"}
    )

    await service.resolve_membership("w3hc")

    assert opened[0][0] == "https://op.example"


@pytest.mark.asyncio
async def test_unconfigured_network(fake_connection, dao_record):
    service, _ = make_service(DaoRegistry([dao_record(networks=[137])]), fake_connection())

    with pytest.raises(NetworkNotConfiguredError):
        await service.resolve_membership("w3hc")

    view = await service.load_detail("w3hc")
    assert view.membership.error_kind == "NetworkNotConfigured"


@pytest.mark.asyncio
async def test_provider_uri_override(fake_connection, dao_record):
    service, opened = make_service(
        DaoRegistry([dao_record(networks=[137])]), fake_connection(), provider_uri_override="http://localhost:8545"
    )

    await service.resolve_membership("w3hc")

    assert opened[0][0] == "http://localhost:8545"


@pytest.mark.asyncio
async def test_close_closes_connections(fake_connection, dao_record):
    connection = fake_connection()
    async with make_service(DaoRegistry([dao_record()]), connection)[0] as service:
        await service.resolve_membership("w3hc")

    assert connection.closed is True


@pytest.mark.asyncio
async def test_is_member(fake_connection, fake_token, dao_record, addresses):
    connection = fake_connection(token=fake_token(balances={addresses.member_a: 1}))
    service, _ = make_service(DaoRegistry([dao_record()]), connection)

    assert await service.is_member("w3hc", addresses.member_a) is True


@pytest.mark.asyncio
async def test_cancelling_detail_load_stops_lookups(fake_connection, fake_token, dao_record, addresses):
    owners = [addresses.member_a] * 20
    token = fake_token(owners=owners, delays={i: 10 for i in range(20)})
    service, _ = make_service(DaoRegistry([dao_record()]), fake_connection(token=token), max_workers=4)

    task = asyncio.create_task(service.load_detail("w3hc"))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    await asyncio.sleep(0)
    assert token.in_flight == 0
    assert len([call for call in token.calls if call[0] == "ownerOf"]) == 4


def test_list_featured(dao_record):
    registry = DaoRegistry([dao_record(), dao_record(name="Hidden", slug="hidden", featured=False)])
    service = DaoPageService(registry, {})

    assert [record.name for record in service.list_featured()] == ["W3HC"]


@pytest.mark.asyncio
@pytest.mark.parametrize("blocks", [None, []])
async def test_no_candidate_blocks_needs_no_endpoint(fake_connection, dao_record, blocks):
    dao = dao_record(networks=[137], proposal_blocks=blocks)
    service, opened = make_service(DaoRegistry([dao]), fake_connection(), provider_uris={})

    assert await service.read_proposals("w3hc") == []

    view = await service.load_detail("w3hc")
    assert view.proposals.status == LoadStatus.SUCCESS
    assert view.proposals.data == []
    assert view.membership.error_kind == "NetworkNotConfigured"
    assert opened == []


def test_every_featured_href_resolves(fake_connection):
    registry = DaoRegistry.from_file(str(Path(__file__).parents[3] / "config" / "daos.example.json"))
    service, _ = make_service(registry, fake_connection())

    for record in service.list_featured():
        assert service.get_dao(record.href) == record
        assert service.get_dao(record.href.lstrip("/")) == record


def test_name_takes_precedence_over_slug(dao_record):
    first = dao_record(name="alpha", slug="beta")
    second = dao_record(name="beta", slug="gamma")
    service, _ = make_service(DaoRegistry([first, second]), None)

    assert service.get_dao("beta") == second
    assert service.get_dao("/gamma") == second
    with pytest.raises(DaoNotFoundError):
        service.get_dao("delta")
