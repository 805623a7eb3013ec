from typing import Any, Dict, List, Mapping

from eth_utils import to_hex

from governance.models.proposal import ProposalRecord
from utils.address_utils import to_checksum_address


def _hex(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    return str(value)


class ProposalMapper(object):
    @staticmethod
    def web3_event_to_proposal(event: Mapping[str, Any], block_number: int) -> ProposalRecord:
        """
        Builds a ProposalRecord from a decoded ProposalCreated log (web3.py EventData).
        `block_number` is the candidate block the log was looked up from.

        Raises KeyError, TypeError or ValueError when the event is not a
        well-formed ProposalCreated log.
        """
        args = event["args"]
        return ProposalRecord(
            proposal_id=str(int(args["proposalId"])),
            proposer=to_checksum_address(args["proposer"]),
            description=args["description"],
            block_number=block_number,
            transaction_hash=_hex(event.get("transactionHash")),
            targets=[to_checksum_address(target) for target in args.get("targets", [])],
            values=[str(int(value)) for value in args.get("values", [])],
            signatures=list(args.get("signatures", [])),
            calldatas=[_hex(calldata) for calldata in args.get("calldatas", [])],
            start_block=args.get("startBlock"),
            end_block=args.get("endBlock"),
        )

    @staticmethod
    def proposal_to_dict(proposal: ProposalRecord) -> Dict[str, Any]:
        return proposal.model_dump(mode="json", exclude_none=True)

    @staticmethod
    def proposals_to_dicts(proposals: List[ProposalRecord]) -> List[Dict[str, Any]]:
        return [ProposalMapper.proposal_to_dict(proposal) for proposal in proposals]
