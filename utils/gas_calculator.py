"""
Gas Calculator
Prices the deployment transaction at the moment of sending
"""

from typing import Dict
from web3 import Web3
from loguru import logger


class GasCalculator:
    """
    Calculates gas fields for a single transaction
    EIP-1559 when the chain reports a base fee, legacy gasPrice otherwise
    """

    def __init__(self, w3: Web3, max_gas_price_gwei: float, priority_fee_gwei: float):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
            max_gas_price_gwei: Hard cap for gasPrice / maxFeePerGas
            priority_fee_gwei: Tip for EIP-1559 transactions
        """
        self.w3 = w3
        self.max_gas_price_gwei = max_gas_price_gwei
        self.priority_fee_gwei = priority_fee_gwei

    def get_jit_gas_price(self) -> int:
        """
        Get Just-In-Time legacy gas price

        Returns:
            Gas price in wei
        """
        gas_price_wei = self.w3.eth.gas_price

        # 5% over the node's suggestion for faster inclusion
        buffered_wei = int(gas_price_wei * 1.05)
        max_allowed_wei = self.w3.to_wei(self.max_gas_price_gwei, 'gwei')

        final_price_wei = min(buffered_wei, max_allowed_wei)

        logger.debug(f"JIT gas price: {self.w3.from_wei(final_price_wei, 'gwei')} gwei")

        return int(final_price_wei)

    def get_eip1559_gas_params(self, base_fee_wei: int) -> Dict[str, int]:
        """
        Get EIP-1559 gas parameters

        Args:
            base_fee_wei: Base fee of the latest block

        Returns:
            Dict with maxFeePerGas and maxPriorityFeePerGas in wei
        """
        priority_fee_wei = self.w3.to_wei(self.priority_fee_gwei, 'gwei')

        # Max fee = base fee * 2 + tip (room for base fee growth)
        max_fee_wei = (base_fee_wei * 2) + priority_fee_wei

        max_allowed_wei = self.w3.to_wei(self.max_gas_price_gwei, 'gwei')
        max_fee_wei = min(max_fee_wei, max_allowed_wei)
        priority_fee_wei = min(priority_fee_wei, max_fee_wei)

        return {
            'maxFeePerGas': int(max_fee_wei),
            'maxPriorityFeePerGas': int(priority_fee_wei)
        }

    def get_fee_params(self) -> Dict[str, int]:
        """
        Gas pricing fields for the next transaction

        Returns:
            Either {'gasPrice'} or {'maxFeePerGas', 'maxPriorityFeePerGas'}
        """
        latest_block = self.w3.eth.get_block('latest')
        base_fee_wei = latest_block.get('baseFeePerGas')

        if base_fee_wei is None:
            return {'gasPrice': self.get_jit_gas_price()}

        return self.get_eip1559_gas_params(base_fee_wei)

    @staticmethod
    def max_cost_wei(gas_limit: int, fee_params: Dict[str, int]) -> int:
        """Worst-case wei spent on gas for the given limit and pricing"""
        price = fee_params.get('maxFeePerGas', fee_params.get('gasPrice', 0))
        return gas_limit * price
