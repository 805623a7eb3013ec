"""
Shared fixtures: in-memory stand-ins for the RPC connection so resolver,
reader and page-service tests never touch the network.
"""

import asyncio
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Optional

import pytest
from hexbytes import HexBytes

from governance.models.dao import DaoRecord
from utils.exceptions import RpcCallError

GOVERNOR_ADDRESS = "0x" + "ab" * 20
TOKEN_ADDRESS = "0x" + "de" * 20
MEMBER_A = "0x1111111111111111111111111111111111111111"
MEMBER_B = "0x2222222222222222222222222222222222222222"
MEMBER_C = "0x3333333333333333333333333333333333333333"


class FakeGovernorCalls:
    def __init__(
        self,
        token_address: Optional[str] = TOKEN_ADDRESS,
        events_by_block: Optional[Dict[int, List[Any]]] = None,
        delays: Optional[Dict[int, float]] = None,
        failing_blocks: Iterable[int] = (),
        fail_token: bool = False,
    ):
        self.token_address = token_address
        self.events_by_block = events_by_block or {}
        self.delays = delays or {}
        self.failing_blocks = set(failing_blocks)
        self.fail_token = fail_token
        self.calls: List[tuple] = []

    async def get_token_address(self, governor_address: str) -> Optional[str]:
        self.calls.append(("token", governor_address))
        if self.fail_token:
            raise RpcCallError(f"token() on {governor_address}", asyncio.TimeoutError())
        return self.token_address

    async def query_event(self, governor_address: str, event_name: str, from_block, to_block="latest") -> List[Any]:
        self.calls.append(("query_event", governor_address, event_name, from_block))
        await asyncio.sleep(self.delays.get(from_block, 0))
        if from_block in self.failing_blocks:
            raise RpcCallError(f"get_logs({event_name}) from block {from_block}", ConnectionError("reset"))
        return list(self.events_by_block.get(from_block, []))


class FakeTokenCalls:
    def __init__(
        self,
        owners: Optional[List[str]] = None,
        name: str = "Members",
        symbol: str = "MEM",
        total_supply: Optional[int] = None,
        delays: Optional[Dict[int, float]] = None,
        failing_token_ids: Iterable[int] = (),
        fail_metadata: bool = False,
        balances: Optional[Dict[str, int]] = None,
    ):
        self.owners = owners or []
        self.name = name
        self.symbol = symbol
        self.total_supply = len(self.owners) if total_supply is None else total_supply
        self.delays = delays or {}
        self.failing_token_ids = set(failing_token_ids)
        self.fail_metadata = fail_metadata
        self.balances = balances or {}
        self.calls: List[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_name(self, token_address: str) -> str:
        self.calls.append(("name", token_address))
        return self.name

    async def get_symbol(self, token_address: str) -> str:
        self.calls.append(("symbol", token_address))
        return self.symbol

    async def get_total_supply(self, token_address: str) -> int:
        self.calls.append(("totalSupply", token_address))
        if self.fail_metadata:
            raise RpcCallError(f"totalSupply() on {token_address}", asyncio.TimeoutError())
        return self.total_supply

    async def get_owner_of(self, token_address: str, token_id: int) -> str:
        self.calls.append(("ownerOf", token_address, token_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(token_id, 0))
            if token_id in self.failing_token_ids:
                raise RpcCallError(f"ownerOf({token_id}) on {token_address}", asyncio.TimeoutError())
            return self.owners[token_id]
        finally:
            self.in_flight -= 1

    async def get_balance_of(self, token_address: str, owner: str) -> int:
        self.calls.append(("balanceOf", token_address, owner))
        return self.balances.get(owner.lower(), 0)


class FakeConnection:
    def __init__(self, governor: Optional[FakeGovernorCalls] = None, token: Optional[FakeTokenCalls] = None):
        self.governor = governor or FakeGovernorCalls()
        self.token = token or FakeTokenCalls()
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.governor.calls) + len(self.token.calls)

    async def close(self) -> None:
        self.closed = True


def make_proposal_event(proposal_id: int, proposer: str, description: str, block_number: int) -> Dict[str, Any]:
    return {
        "event": "ProposalCreated",
        "blockNumber": block_number,
        "transactionHash": HexBytes("0x" + f"{block_number:064x}"),
        "args": {
            "proposalId": proposal_id,
            "proposer": proposer,
            "targets": [MEMBER_C],
            "values": [0],
            "signatures": [""],
            "calldatas": [HexBytes("0x1234")],
            "startBlock": block_number + 1,
            "endBlock": block_number + 100,
            "description": description,
        },
    }


@pytest.fixture
def fake_connection():
    """Factory for FakeConnection(governor=..., token=...)."""

    def factory(governor: Optional[FakeGovernorCalls] = None, token: Optional[FakeTokenCalls] = None):
        return FakeConnection(governor=governor, token=token)

    return factory


@pytest.fixture
def fake_governor():
    return FakeGovernorCalls


@pytest.fixture
def fake_token():
    return FakeTokenCalls


@pytest.fixture
def proposal_event():
    return make_proposal_event


@pytest.fixture
def dao_record():
    def factory(**overrides) -> DaoRecord:
        fields = {
            "name": "W3HC",
            "slug": "w3hc",
            "address": GOVERNOR_ADDRESS,
            "networks": [10],
            "description": "We want to build integrations through mentoring and education.",
            "category": "Impact",
            "treasury_size": "$2.5K",
        }
        fields.update(overrides)
        return DaoRecord(**fields)

    return factory


@pytest.fixture
def addresses():
    return SimpleNamespace(
        governor=GOVERNOR_ADDRESS,
        token=TOKEN_ADDRESS,
        member_a=MEMBER_A,
        member_b=MEMBER_B,
        member_c=MEMBER_C,
    )
