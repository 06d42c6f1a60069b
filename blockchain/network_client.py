"""
Network Client
Signs and broadcasts the deployment transaction and waits for confirmation
"""

import time
import asyncio
from dataclasses import dataclass
from typing import Dict, Optional
from web3 import Web3
from web3.exceptions import TransactionNotFound
from eth_account import Account
from loguru import logger

from .artifacts import ContractArtifact
from .exceptions import (
    ConfigurationError,
    ConfirmationError,
    ConfirmationTimeoutError,
    SubmissionError,
)
from utils.gas_calculator import GasCalculator


@dataclass(frozen=True)
class DeploymentHandle:
    """A broadcast deployment transaction that has not been confirmed yet"""

    contract_name: str
    tx_hash: str
    sender: str
    nonce: int
    gas_limit: int


class NetworkClient:
    """
    Deploys contracts from a single local account over JSON-RPC
    """

    def __init__(
        self,
        w3: Web3,
        account,
        chain_id: Optional[int] = None,
        gas_limit_buffer: float = 1.2,
        default_gas_limit: int = 3_000_000,
        max_gas_price_gwei: float = 500,
        priority_fee_gwei: float = 2,
        confirmations: int = 1,
        confirmation_timeout: float = 300,
        poll_interval: float = 2.0
    ):
        """
        Initialize Network Client

        Args:
            w3: Web3 instance
            account: eth_account LocalAccount used to sign
            chain_id: Chain ID for replay protection (None = ask the node)
            gas_limit_buffer: Multiplier applied to the gas estimate
            default_gas_limit: Gas limit used when estimation fails
            max_gas_price_gwei: Cap for gas price / max fee
            priority_fee_gwei: EIP-1559 tip
            confirmations: Blocks (including the inclusion block) to wait for
            confirmation_timeout: Seconds before the wait gives up
            poll_interval: Seconds between receipt polls
        """
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id
        self.gas_limit_buffer = gas_limit_buffer
        self.default_gas_limit = default_gas_limit
        self.confirmations = confirmations
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval

        self.gas_calculator = GasCalculator(w3, max_gas_price_gwei, priority_fee_gwei)

    @classmethod
    def from_config(cls, config) -> 'NetworkClient':
        """
        Build a client from a DeployConfig

        Raises:
            ConfigurationError: private key cannot be parsed
        """
        try:
            account = Account.from_key(config.private_key)
        except Exception as e:
            # Never echo the key itself
            raise ConfigurationError(f"Invalid deployer private key: {type(e).__name__}") from None

        w3 = Web3(Web3.HTTPProvider(config.rpc_url))

        return cls(
            w3,
            account,
            chain_id=config.chain_id,
            gas_limit_buffer=config.gas_limit_buffer,
            default_gas_limit=config.default_gas_limit,
            max_gas_price_gwei=config.max_gas_price_gwei,
            priority_fee_gwei=config.priority_fee_gwei,
            confirmations=config.confirmations,
            confirmation_timeout=config.confirmation_timeout,
            poll_interval=config.poll_interval
        )

    @property
    def address(self) -> str:
        return self.account.address

    async def submit_deployment(self, artifact: ContractArtifact) -> DeploymentHandle:
        """
        Sign and broadcast a deployment transaction (no constructor arguments)

        Args:
            artifact: Resolved contract artifact

        Returns:
            DeploymentHandle for the broadcast transaction

        Raises:
            SubmissionError: network unreachable, insufficient funds,
                or the node rejected the transaction
        """
        try:
            return self._submit(artifact)
        except SubmissionError:
            raise
        except Exception as e:
            raise SubmissionError(f"Failed to submit {artifact.name} deployment: {e}") from e

    def _submit(self, artifact: ContractArtifact) -> DeploymentHandle:
        if not self.w3.is_connected():
            raise SubmissionError("Failed to connect to network")

        sender = self.account.address
        logger.info(f"Deploying from: {sender}")

        chain_id = self.chain_id if self.chain_id is not None else self.w3.eth.chain_id

        Contract = self.w3.eth.contract(abi=list(artifact.abi), bytecode=artifact.bytecode)
        constructor = Contract.constructor()

        gas_limit = self._estimate_gas_limit(constructor, sender)
        fee_params = self.gas_calculator.get_fee_params()

        balance = self.w3.eth.get_balance(sender)
        max_cost = GasCalculator.max_cost_wei(gas_limit, fee_params)

        logger.info(f"Account balance: {self.w3.from_wei(balance, 'ether')} ETH")
        logger.info(f"Gas limit: {gas_limit}")
        logger.info(f"Estimated max deployment cost: {self.w3.from_wei(max_cost, 'ether')} ETH")

        if balance < max_cost:
            raise SubmissionError(
                f"Insufficient funds for deployment: balance {balance} wei, "
                f"need up to {max_cost} wei"
            )

        nonce = self.w3.eth.get_transaction_count(sender, 'pending')

        transaction = constructor.build_transaction({
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': chain_id,
            **fee_params
        })

        logger.debug("Signing transaction...")
        signed_tx = self.account.sign_transaction(transaction)

        logger.debug("Sending deployment transaction...")
        tx_hash = Web3.to_hex(self.w3.eth.send_raw_transaction(signed_tx.raw_transaction))

        logger.info(f"Transaction sent: {tx_hash}")

        return DeploymentHandle(
            contract_name=artifact.name,
            tx_hash=tx_hash,
            sender=sender,
            nonce=nonce,
            gas_limit=gas_limit
        )

    def _estimate_gas_limit(self, constructor, sender: str) -> int:
        try:
            gas_estimate = constructor.estimate_gas({'from': sender})
            return int(gas_estimate * self.gas_limit_buffer)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            return self.default_gas_limit

    async def wait_for_confirmation(self, handle: DeploymentHandle) -> Dict:
        """
        Wait until the deployment transaction is mined and deep enough

        Polls for the receipt, yielding to the event loop between polls.

        Args:
            handle: Handle returned by submit_deployment

        Returns:
            Transaction receipt

        Raises:
            ConfirmationError: transaction reverted or the node failed
            ConfirmationTimeoutError: not confirmed within the timeout
        """
        logger.info(
            f"Waiting for confirmation ({self.confirmations} block(s), "
            f"timeout {self.confirmation_timeout}s)..."
        )

        deadline = time.monotonic() + self.confirmation_timeout

        while True:
            receipt = self._get_receipt(handle.tx_hash)

            if receipt is not None:
                if receipt['status'] != 1:
                    raise ConfirmationError(
                        f"Deployment transaction reverted in block {receipt['blockNumber']}",
                        tx_hash=handle.tx_hash
                    )

                if self._confirmation_depth(receipt) >= self.confirmations:
                    logger.info(
                        f"Transaction {handle.tx_hash} confirmed in block "
                        f"{receipt['blockNumber']} (gas used: {receipt['gasUsed']})"
                    )
                    return receipt

            if time.monotonic() >= deadline:
                raise ConfirmationTimeoutError(self._timeout_message(handle), tx_hash=handle.tx_hash)

            await asyncio.sleep(self.poll_interval)

    def _get_receipt(self, tx_hash: str):
        try:
            return self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        except Exception as e:
            raise ConfirmationError(f"Error fetching receipt: {e}", tx_hash=tx_hash) from e

    def _confirmation_depth(self, receipt) -> int:
        if self.confirmations <= 1:
            return 1

        try:
            current_block = self.w3.eth.block_number
        except Exception as e:
            raise ConfirmationError(f"Error fetching block number: {e}") from e

        return current_block - receipt['blockNumber'] + 1

    def _timeout_message(self, handle: DeploymentHandle) -> str:
        try:
            self.w3.eth.get_transaction(handle.tx_hash)
            state = "still pending"
        except TransactionNotFound:
            state = "dropped by the node"
        except Exception:
            state = "in an unknown state"

        return (
            f"Deployment transaction {handle.tx_hash} not confirmed after "
            f"{self.confirmation_timeout}s ({state})"
        )

    def get_balance(self) -> int:
        """Deployer balance in wei"""
        return self.w3.eth.get_balance(self.account.address)
