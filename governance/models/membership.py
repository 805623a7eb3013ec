from typing import FrozenSet

from pydantic import BaseModel, ConfigDict, model_validator

from utils.address_utils import is_valid_address, to_checksum_address


class NftTokenInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    name: str
    symbol: str
    total_supply: int


class MembershipSet(BaseModel):
    """Distinct holders of a DAO's membership NFT at the time of the read."""

    model_config = ConfigDict(frozen=True)

    governor_address: str
    token: NftTokenInfo
    members: FrozenSet[str]

    @model_validator(mode="after")
    def _check_cardinality(self) -> "MembershipSet":
        if len(self.members) > self.token.total_supply:
            raise ValueError(
                f"{len(self.members)} members exceed total supply {self.token.total_supply} of {self.token.address}"
            )
        return self

    @property
    def member_count(self) -> int:
        return len(self.members)

    def __contains__(self, address: object) -> bool:
        # Members are stored checksummed; any valid casing of an address matches
        return is_valid_address(address) and to_checksum_address(address) in self.members
