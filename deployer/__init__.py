"""
Deployer Package
Configuration and the deployment orchestrator
"""

from blockchain import ArtifactRegistry, NetworkClient, AddressAccessor

from .config import DeployConfig, load_config
from .orchestrator import DeploymentOrchestrator, DeploymentState, OutcomeStatus

__all__ = [
    'DeployConfig',
    'load_config',
    'DeploymentOrchestrator',
    'DeploymentState',
    'OutcomeStatus',
    'build_orchestrator',
]


def build_orchestrator(config: DeployConfig) -> DeploymentOrchestrator:
    """Wire the orchestrator to the real artifact tree and network"""
    return DeploymentOrchestrator(
        config.contract_name,
        ArtifactRegistry(config.artifacts_dir),
        NetworkClient.from_config(config),
        AddressAccessor()
    )
