from typing import Any, Optional

from eth_utils import is_address
from eth_utils import to_checksum_address as eth_to_checksum_address

from utils.exceptions import InvalidAddressError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def is_valid_address(address: Any) -> bool:
    """
    True for a 0x-prefixed 20 byte hex string. Mixed-case input must also
    carry a valid EIP-55 checksum; all-lower and all-upper input is accepted.
    """
    if not isinstance(address, str) or not address.startswith("0x"):
        return False
    return is_address(address)


def is_zero_address(address: Optional[str]) -> bool:
    return address is not None and address.lower() == ZERO_ADDRESS


def to_checksum_address(address: str) -> str:
    """Returns the EIP-55 form of an address. Raises ValueError on malformed input."""
    if not is_valid_address(address):
        raise ValueError(f"Malformed address: {address!r}")
    return eth_to_checksum_address(address)


def validate_address(address: Any, label: str = "address") -> str:
    """Returns the checksummed address or raises InvalidAddressError."""
    if not is_valid_address(address):
        raise InvalidAddressError(f"Invalid {label} {address!r}: expected a 20 byte hex address with a valid checksum")
    return eth_to_checksum_address(address)
