"""
Address Accessor
Extracts the deployed contract address from a confirmed receipt
"""

from typing import NewType
from web3 import Web3

from .exceptions import InternalError

ContractAddress = NewType('ContractAddress', str)


class AddressAccessor:
    """Reads contractAddress out of a confirmed deployment receipt"""

    def get_address(self, receipt) -> ContractAddress:
        """
        Get the checksummed address of the deployed contract

        Args:
            receipt: Receipt returned by NetworkClient.wait_for_confirmation

        Returns:
            ContractAddress

        Raises:
            InternalError: receipt carries no valid contract address
        """
        try:
            raw_address = receipt['contractAddress']
        except (KeyError, TypeError) as e:
            raise InternalError(f"Confirmed receipt has no contractAddress field: {e}") from e

        if not raw_address:
            raise InternalError("Confirmed receipt has an empty contractAddress")

        try:
            return ContractAddress(Web3.to_checksum_address(raw_address))
        except Exception as e:
            raise InternalError(f"Invalid contract address {raw_address!r}: {e}") from e
