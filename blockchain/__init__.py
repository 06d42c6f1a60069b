"""
Blockchain Interaction Package
Artifact resolution, transaction submission, and confirmation
"""

from .artifacts import ArtifactRegistry, ContractArtifact
from .network_client import NetworkClient, DeploymentHandle
from .address_accessor import AddressAccessor, ContractAddress
from .exceptions import (
    DeploymentError,
    ConfigurationError,
    ArtifactNotFoundError,
    SubmissionError,
    ConfirmationError,
    ConfirmationTimeoutError,
    InternalError,
)

__all__ = [
    'ArtifactRegistry',
    'ContractArtifact',
    'NetworkClient',
    'DeploymentHandle',
    'AddressAccessor',
    'ContractAddress',
    'DeploymentError',
    'ConfigurationError',
    'ArtifactNotFoundError',
    'SubmissionError',
    'ConfirmationError',
    'ConfirmationTimeoutError',
    'InternalError',
]
