"""
Deployment Orchestrator
Runs the resolve -> submit -> confirm -> report pipeline for one contract
"""

from enum import Enum
from typing import List, Optional
from loguru import logger

from blockchain.artifacts import ArtifactRegistry
from blockchain.network_client import NetworkClient, DeploymentHandle
from blockchain.address_accessor import AddressAccessor, ContractAddress
from blockchain.exceptions import DeploymentError, InternalError


class OutcomeStatus(Enum):
    """Final result of a run"""

    SUCCESS = 0
    FAILURE = 1

    @property
    def exit_code(self) -> int:
        return self.value


class DeploymentState(Enum):
    """Pipeline stages; only ever move forward"""

    IDLE = 'idle'
    ARTIFACT_RESOLVED = 'artifact_resolved'
    SUBMITTED = 'submitted'
    CONFIRMED = 'confirmed'
    REPORTED = 'reported'
    FAILED = 'failed'


_TRANSITIONS = {
    DeploymentState.IDLE: {DeploymentState.ARTIFACT_RESOLVED},
    DeploymentState.ARTIFACT_RESOLVED: {DeploymentState.SUBMITTED},
    DeploymentState.SUBMITTED: {DeploymentState.CONFIRMED},
    DeploymentState.CONFIRMED: {DeploymentState.REPORTED},
    DeploymentState.REPORTED: set(),
    DeploymentState.FAILED: set(),
}


class DeploymentOrchestrator:
    """
    Deploys a single contract exactly once

    No step is retried; any error moves the run to FAILED and the caller
    decides whether to invoke the whole pipeline again.
    """

    def __init__(
        self,
        contract_name: str,
        registry: ArtifactRegistry,
        client: NetworkClient,
        accessor: Optional[AddressAccessor] = None
    ):
        """
        Initialize Deployment Orchestrator

        Args:
            contract_name: Artifact name of the contract to deploy
            registry: Artifact registry
            client: Network client used to submit and confirm
            accessor: Reads the address from the confirmed receipt
        """
        self.contract_name = contract_name
        self.registry = registry
        self.client = client
        self.accessor = accessor or AddressAccessor()

        self.state = DeploymentState.IDLE
        self.history: List[DeploymentState] = [DeploymentState.IDLE]
        self.handle: Optional[DeploymentHandle] = None
        self.address: Optional[ContractAddress] = None
        self.error: Optional[BaseException] = None

    def _advance(self, new_state: DeploymentState):
        if new_state is not DeploymentState.FAILED and new_state not in _TRANSITIONS[self.state]:
            raise InternalError(f"Illegal transition {self.state.value} -> {new_state.value}")

        self.state = new_state
        self.history.append(new_state)

    async def deploy(self) -> ContractAddress:
        """
        Run the four pipeline steps in order

        Returns:
            Address of the deployed contract

        Raises:
            DeploymentError: whichever step failed, unmodified
        """
        if self.state is not DeploymentState.IDLE:
            raise InternalError("Deployment orchestrator can only run once")

        try:
            artifact = self.registry.resolve(self.contract_name)
            self._advance(DeploymentState.ARTIFACT_RESOLVED)

            logger.info(f"Deploying {artifact.name} contract...")

            self.handle = await self.client.submit_deployment(artifact)
            self._advance(DeploymentState.SUBMITTED)

            receipt = await self.client.wait_for_confirmation(self.handle)
            self._advance(DeploymentState.CONFIRMED)

            try:
                address = self.accessor.get_address(receipt)
            except InternalError:
                raise
            except Exception as e:
                raise InternalError(f"Address lookup failed after confirmation: {e}") from e

            # Handle is subsumed by the address from here on
            self.handle = None
            self.address = address

            logger.info(f"{artifact.name} deployed to: {address}")
            self._advance(DeploymentState.REPORTED)

            return address

        except BaseException as e:
            self.error = e
            self._advance(DeploymentState.FAILED)
            raise

    async def run(self) -> OutcomeStatus:
        """
        Deploy and convert the result into an OutcomeStatus

        Every error is logged with its traceback; nothing is re-raised except
        KeyboardInterrupt/SystemExit-style control flow.
        """
        try:
            await self.deploy()
        except DeploymentError as e:
            logger.opt(exception=e).error(f"Deployment failed ({type(e).__name__}): {e}")
            return OutcomeStatus.FAILURE
        except Exception as e:
            logger.opt(exception=e).error(f"Unexpected error during deployment: {e}")
            return OutcomeStatus.FAILURE

        logger.success("Deployment completed successfully!")
        return OutcomeStatus.SUCCESS
