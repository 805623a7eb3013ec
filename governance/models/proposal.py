from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ProposalRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # uint256 kept as a decimal string
    proposal_id: str
    proposer: str
    description: str
    block_number: int

    transaction_hash: str | None = None
    targets: List[str] = Field(default_factory=list)
    values: List[str] = Field(default_factory=list)
    signatures: List[str] = Field(default_factory=list)
    calldatas: List[str] = Field(default_factory=list)
    start_block: int | None = None
    end_block: int | None = None
