from typing import List, Optional

from abi.dao_governance_abi import PROPOSAL_CREATED_EVENT
from governance.executors.bounded_work_executor import DEFAULT_MAX_WORKERS, BoundedWorkExecutor
from governance.mappers.proposal_mapper import ProposalMapper
from governance.models.dao import DaoRecord
from governance.models.proposal import ProposalRecord
from governance.rpc_connection import RpcConnection
from utils.address_utils import validate_address
from utils.exceptions import ProposalFetchError, RpcCallError
from utils.logger_utils import get_logger

logger = get_logger("Proposal Reader")


class ProposalReader(object):
    """
    Rebuilds a DAO's proposals from ProposalCreated logs, looked up at the
    block numbers configured for the DAO.
    """

    def __init__(self, connection: RpcConnection, max_workers: int = DEFAULT_MAX_WORKERS):
        self._connection = connection
        self._max_workers = max_workers

    async def read_proposals(self, dao: DaoRecord) -> List[ProposalRecord]:
        if not dao.proposal_blocks:
            return []

        governor_address = validate_address(dao.address, "governor address")

        async def read_block(block_number: int) -> Optional[ProposalRecord]:
            return await self._read_proposal_at(governor_address, block_number)

        executor = BoundedWorkExecutor(self._max_workers, name=f"proposal lookups on {governor_address}")
        try:
            proposals = await executor.map(read_block, dao.proposal_blocks)
        except RpcCallError as e:
            raise ProposalFetchError(f"Could not read proposals of {dao.name}: {e}") from e

        # Blocks without a ProposalCreated log contribute nothing
        found = [proposal for proposal in proposals if proposal is not None]
        logger.info(f"Found {len(found)} proposals in {len(dao.proposal_blocks)} candidate blocks for DAO {dao.name}")
        return found

    async def _read_proposal_at(self, governor_address: str, block_number: int) -> Optional[ProposalRecord]:
        events = await self._connection.governor.query_event(
            governor_address, PROPOSAL_CREATED_EVENT, from_block=block_number
        )
        if not events:
            logger.debug(f"No {PROPOSAL_CREATED_EVENT} log on {governor_address} from block {block_number}")
            return None

        try:
            return ProposalMapper.web3_event_to_proposal(events[0], block_number)
        except (KeyError, TypeError, ValueError) as e:
            raise ProposalFetchError(
                f"Malformed {PROPOSAL_CREATED_EVENT} log on {governor_address} at block {block_number}: {e}"
            ) from e
