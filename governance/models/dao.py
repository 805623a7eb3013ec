from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from utils.validation_utils import validate_block_number, validate_chain_ids


class DaoRecord(BaseModel):
    """
    Static description of one DAO, loaded once from the registry file.

    `address` is the governor contract and is kept as configured: a malformed
    value is reported when the DAO is read, not when the registry loads.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    address: str
    networks: Tuple[int, ...]
    cross_chain: bool = False
    # Blocks at which ProposalCreated events are known to have been emitted
    proposal_blocks: Optional[Tuple[int, ...]] = None

    # Listing metadata
    slug: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    treasury_size: Optional[str] = None
    featured: bool = True

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("DAO name must not be empty")
        return value

    @field_validator("networks")
    @classmethod
    def _check_networks(cls, value: Tuple[int, ...]) -> Tuple[int, ...]:
        validate_chain_ids(value)
        return value

    @field_validator("proposal_blocks")
    @classmethod
    def _check_proposal_blocks(cls, value: Optional[Tuple[int, ...]]) -> Optional[Tuple[int, ...]]:
        if value is not None:
            for block_number in value:
                validate_block_number(block_number)
        return value

    @property
    def home_network(self) -> int:
        return self.networks[0]

    @property
    def href(self) -> str:
        return f"/{self.slug or self.name}"
