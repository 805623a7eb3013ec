import asyncio
from typing import FrozenSet

from governance.executors.bounded_work_executor import DEFAULT_MAX_WORKERS, BoundedWorkExecutor
from governance.models.dao import DaoRecord
from governance.models.membership import MembershipSet, NftTokenInfo
from governance.rpc_connection import RpcConnection
from utils.address_utils import is_valid_address, is_zero_address, to_checksum_address, validate_address
from utils.exceptions import (
    MembershipFetchError,
    RpcCallError,
    UpstreamResolutionError,
)
from utils.logger_utils import get_logger

logger = get_logger("Membership Resolver")


class MembershipResolver(object):
    """
    Derives a DAO's member set from its membership NFT: the governor points
    at the token, and every holder of a token id in [0, totalSupply) is a member.
    """

    def __init__(self, connection: RpcConnection, max_workers: int = DEFAULT_MAX_WORKERS):
        self._connection = connection
        self._max_workers = max_workers

    async def resolve_membership(self, dao: DaoRecord) -> MembershipSet:
        governor_address = validate_address(dao.address, "governor address")
        token_address = await self.resolve_token_address(governor_address)

        try:
            name, symbol, total_supply = await asyncio.gather(
                self._connection.token.get_name(token_address),
                self._connection.token.get_symbol(token_address),
                self._connection.token.get_total_supply(token_address),
            )
        except RpcCallError as e:
            raise MembershipFetchError(f"Could not read metadata of membership token {token_address}: {e}") from e

        token = NftTokenInfo(address=token_address, name=name, symbol=symbol, total_supply=total_supply)
        logger.info(f"Enumerating {total_supply} {symbol} token owners for DAO {dao.name}")

        members = await self._enumerate_owners(token_address, total_supply)
        logger.info(f"DAO {dao.name} has {len(members)} members")
        return MembershipSet(governor_address=governor_address, token=token, members=members)

    async def resolve_token_address(self, governor_address: str) -> str:
        try:
            token_address = await self._connection.governor.get_token_address(governor_address)
        except RpcCallError as e:
            raise UpstreamResolutionError(f"Could not resolve the token of governor {governor_address}: {e}") from e

        if not token_address or is_zero_address(token_address) or not is_valid_address(token_address):
            raise UpstreamResolutionError(
                f"Governor {governor_address} returned an invalid token address {token_address!r}"
            )
        return to_checksum_address(token_address)

    async def is_member(self, dao: DaoRecord, account: str) -> bool:
        """True when `account` currently holds at least one membership token."""
        governor_address = validate_address(dao.address, "governor address")
        account = validate_address(account, "account address")
        token_address = await self.resolve_token_address(governor_address)
        try:
            balance = await self._connection.token.get_balance_of(token_address, account)
        except RpcCallError as e:
            raise MembershipFetchError(f"Could not read the balance of {account}: {e}") from e
        return balance > 0

    async def _enumerate_owners(self, token_address: str, total_supply: int) -> FrozenSet[str]:
        if total_supply <= 0:
            return frozenset()

        async def get_owner(token_id: int) -> str:
            owner = await self._connection.token.get_owner_of(token_address, token_id)
            if not is_valid_address(owner):
                raise MembershipFetchError(f"Token {token_id} of {token_address} has a malformed owner {owner!r}")
            return to_checksum_address(owner)

        executor = BoundedWorkExecutor(self._max_workers, name=f"ownerOf lookups on {token_address}")
        try:
            owners = await executor.map(get_owner, range(total_supply))
        except RpcCallError as e:
            raise MembershipFetchError(f"Could not enumerate owners of {token_address}: {e}") from e
        return frozenset(owners)
