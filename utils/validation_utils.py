from typing import Iterable


def validate_block_number(block_number: int) -> None:
    """
    Validate a single block number.

    Args:
        block_number: The block number to validate, must be >= 0

    Raises:
        ValueError: If the block number is invalid
    """
    if isinstance(block_number, bool) or not isinstance(block_number, int):
        raise ValueError(f"Block number must be an integer, got {block_number!r}")
    if block_number < 0:
        raise ValueError(f"Block number must be greater than or equal to 0, got {block_number}")


def validate_chain_ids(chain_ids: Iterable[int]) -> None:
    """
    Validate the network identifiers a DAO is deployed on.

    Raises:
        ValueError: If the collection is empty or holds a non-positive id.
    """
    chain_ids = list(chain_ids)
    if not chain_ids:
        raise ValueError("At least one network id is required")
    for chain_id in chain_ids:
        if chain_id <= 0:
            raise ValueError(f"Network id must be a positive integer, got {chain_id}")
