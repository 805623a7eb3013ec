import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Union

from aiohttp import ClientError
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception

from abi.dao_governance_abi import GOVERNOR_ABI
from abi.erc721_abi import ERC721_ABI
from governance.providers.provider_factory import DEFAULT_TIMEOUT, get_async_provider_from_uri
from utils.exceptions import RpcCallError
from utils.logger_utils import get_logger

logger = get_logger("RPC Connection")

# Everything a single contract call can fail with: node errors and bad return data
# surface as Web3Exception (or ValueError on older nodes), transport as aiohttp/OS errors.
RPC_EXCEPTIONS = (
    Web3Exception,
    ClientError,
    asyncio.TimeoutError,
    ConnectionError,
    OSError,
    ValueError,
    OverflowError,
)

BlockIdentifier = Union[int, str]


async def _call(description: str, request: Callable[[], Awaitable[Any]]) -> Any:
    try:
        return await request()
    except RPC_EXCEPTIONS as e:
        logger.debug(f"{description} failed: {e}")
        raise RpcCallError(description, e) from e


class _ContractCalls(object):
    def __init__(self, web3: AsyncWeb3, abi: List[Dict[str, Any]]):
        self._web3 = web3
        self._abi = abi
        self._contracts: Dict[str, Any] = {}

    def _contract(self, address: str):
        contract = self._contracts.get(address)
        if contract is None:
            checksum_address = self._web3.to_checksum_address(address)
            contract = self._web3.eth.contract(address=checksum_address, abi=self._abi)
            self._contracts[address] = contract
        return contract


class GovernorCalls(_ContractCalls):
    def __init__(self, web3: AsyncWeb3):
        super().__init__(web3, GOVERNOR_ABI)

    async def get_token_address(self, governor_address: str) -> str:
        contract = self._contract(governor_address)
        return await _call(f"token() on {governor_address}", lambda: contract.functions.token().call())

    async def query_event(
        self,
        governor_address: str,
        event_name: str,
        from_block: BlockIdentifier,
        to_block: BlockIdentifier = "latest",
    ) -> List[Any]:
        """Returns the decoded `event_name` logs of the governor in [from_block, to_block]."""
        contract = self._contract(governor_address)
        events = await _call(
            f"get_logs({event_name}) on {governor_address} from block {from_block}",
            lambda: getattr(contract.events, event_name)().get_logs(from_block=from_block, to_block=to_block),
        )
        return list(events)


class TokenCalls(_ContractCalls):
    def __init__(self, web3: AsyncWeb3):
        super().__init__(web3, ERC721_ABI)

    async def get_name(self, token_address: str) -> str:
        contract = self._contract(token_address)
        return await _call(f"name() on {token_address}", lambda: contract.functions.name().call())

    async def get_symbol(self, token_address: str) -> str:
        contract = self._contract(token_address)
        return await _call(f"symbol() on {token_address}", lambda: contract.functions.symbol().call())

    async def get_total_supply(self, token_address: str) -> int:
        contract = self._contract(token_address)
        return await _call(f"totalSupply() on {token_address}", lambda: contract.functions.totalSupply().call())

    async def get_owner_of(self, token_address: str, token_id: int) -> str:
        contract = self._contract(token_address)
        return await _call(f"ownerOf({token_id}) on {token_address}", lambda: contract.functions.ownerOf(token_id).call())

    async def get_balance_of(self, token_address: str, owner: str) -> int:
        contract = self._contract(token_address)
        checksum_owner = self._web3.to_checksum_address(owner)
        return await _call(
            f"balanceOf({owner}) on {token_address}", lambda: contract.functions.balanceOf(checksum_owner).call()
        )


class RpcConnection(object):
    """
    Read-only handle on one JSON-RPC endpoint, grouped by contract interface.
    Every call is a single round-trip and raises RpcCallError on failure.
    """

    def __init__(self, web3: AsyncWeb3, endpoint_uri: str | None = None):
        self._web3 = web3
        self.endpoint_uri = endpoint_uri
        self.governor = GovernorCalls(web3)
        self.token = TokenCalls(web3)

    async def get_chain_id(self) -> int:
        return await _call("eth_chainId", lambda: self._web3.eth.chain_id)

    async def close(self) -> None:
        # Releases the provider's cached aiohttp sessions
        await self._web3.provider.disconnect()

    async def __aenter__(self) -> "RpcConnection":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def connect(endpoint_uri: str, timeout: int = DEFAULT_TIMEOUT) -> RpcConnection:
    """Creates a connection bound to `endpoint_uri`. No request is sent until the first call."""
    provider = get_async_provider_from_uri(endpoint_uri, timeout=timeout)
    logger.info(f"Connecting to JSON-RPC endpoint {endpoint_uri}")
    return RpcConnection(AsyncWeb3(provider), endpoint_uri=endpoint_uri)
