import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

from governance.executors.bounded_work_executor import DEFAULT_MAX_WORKERS
from governance.models.dao import DaoRecord
from governance.models.load_state import DaoDetailView, LoadResult
from governance.models.membership import MembershipSet
from governance.models.proposal import ProposalRecord
from governance.providers.provider_factory import DEFAULT_TIMEOUT
from governance.rpc_connection import RpcConnection, connect
from governance.service.dao_registry import DaoRegistry
from governance.service.membership_resolver import MembershipResolver
from governance.service.proposal_reader import ProposalReader
from utils.exceptions import DaoReaderError, NetworkNotConfiguredError
from utils.logger_utils import get_logger

logger = get_logger("DAO Page Service")

ConnectionFactory = Callable[[str, int], RpcConnection]


class DaoPageService(object):
    """
    What the listing and detail pages consume: the featured DAOs from the
    registry, and the on-chain membership and proposals of one DAO.

    One connection is opened per chain id on first use and shared by every
    read against that chain until close().
    """

    def __init__(
        self,
        registry: DaoRegistry,
        provider_uris: Dict[int, str],
        connection_factory: ConnectionFactory = connect,
        max_workers: int = DEFAULT_MAX_WORKERS,
        rpc_timeout: int = DEFAULT_TIMEOUT,
        provider_uri_override: Optional[str] = None,
    ):
        self._registry = registry
        self._provider_uris = dict(provider_uris)
        self._connection_factory = connection_factory
        self._max_workers = max_workers
        self._rpc_timeout = rpc_timeout
        self._provider_uri_override = provider_uri_override
        self._connections: Dict[int, RpcConnection] = {}

    @classmethod
    def from_settings(
        cls,
        settings,
        registry: Optional[DaoRegistry] = None,
        provider_uri_override: Optional[str] = None,
        max_workers: Optional[int] = None,
    ) -> "DaoPageService":
        if registry is None:
            registry = DaoRegistry.from_file(settings.registry.file)
        return cls(
            registry,
            settings.ethereum.provider_uris,
            max_workers=max_workers or settings.ethereum.max_workers,
            rpc_timeout=settings.ethereum.rpc_timeout,
            provider_uri_override=provider_uri_override,
        )

    @property
    def registry(self) -> DaoRegistry:
        return self._registry

    def list_featured(self) -> List[DaoRecord]:
        return self._registry.list_featured()

    def get_dao(self, name: str) -> DaoRecord:
        """Looks a DAO up by name, then by the slug of its listing href."""
        record = self._registry.find(name)
        if record is not None:
            return record
        return self._registry.get_by_slug(name.lstrip("/") if isinstance(name, str) else name)

    async def resolve_membership(self, name: str) -> MembershipSet:
        dao = self.get_dao(name)
        return await self._membership_resolver(dao).resolve_membership(dao)

    async def read_proposals(self, name: str) -> List[ProposalRecord]:
        return await self._read_proposals(self.get_dao(name))

    async def is_member(self, name: str, account: str) -> bool:
        dao = self.get_dao(name)
        return await self._membership_resolver(dao).is_member(dao, account)

    async def load_detail(self, name: str) -> DaoDetailView:
        """
        Loads both halves of the detail page concurrently. An unknown name
        raises DaoNotFoundError; read failures land in the view as ERROR states.
        """
        dao = self.get_dao(name)
        membership, proposals = await asyncio.gather(
            self._capture(dao, "membership", lambda: self._membership_resolver(dao).resolve_membership(dao)),
            self._capture(dao, "proposals", lambda: self._read_proposals(dao)),
        )
        return DaoDetailView(dao=dao, membership=membership, proposals=proposals)

    async def close(self) -> None:
        connections = list(self._connections.values())
        self._connections.clear()
        for connection in connections:
            await connection.close()

    async def __aenter__(self) -> "DaoPageService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _read_proposals(self, dao: DaoRecord) -> List[ProposalRecord]:
        # No candidate blocks: nothing to read, so no endpoint is needed
        if not dao.proposal_blocks:
            return []
        return await self._proposal_reader(dao).read_proposals(dao)

    def _membership_resolver(self, dao: DaoRecord) -> MembershipResolver:
        return MembershipResolver(self._connection_for(dao), max_workers=self._max_workers)

    def _proposal_reader(self, dao: DaoRecord) -> ProposalReader:
        return ProposalReader(self._connection_for(dao), max_workers=self._max_workers)

    def _connection_for(self, dao: DaoRecord) -> RpcConnection:
        if self._provider_uri_override:
            chain_id, uri = dao.home_network, self._provider_uri_override
        else:
            chain_id = next((network for network in dao.networks if network in self._provider_uris), None)
            if chain_id is None:
                raise NetworkNotConfiguredError(
                    f"No RPC provider configured for any network of DAO {dao.name} {list(dao.networks)}"
                )
            uri = self._provider_uris[chain_id]

        connection = self._connections.get(chain_id)
        if connection is None:
            connection = self._connection_factory(uri, self._rpc_timeout)
            self._connections[chain_id] = connection
        return connection

    @staticmethod
    async def _capture(dao: DaoRecord, label: str, load: Callable[[], Awaitable[object]]) -> LoadResult:
        try:
            return LoadResult.success(await load())
        except DaoReaderError as e:
            logger.warning(f"Loading {label} of DAO {dao.name} failed: {e.kind}: {e.message}")
            return LoadResult.failure(e)
