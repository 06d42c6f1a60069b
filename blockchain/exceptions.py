"""
Deployment Exceptions
Error taxonomy for the deployment pipeline
"""


class DeploymentError(Exception):
    """Base class for every failure that ends a deployment run"""


class ConfigurationError(DeploymentError):
    """Missing or invalid network/account configuration"""


class ArtifactNotFoundError(DeploymentError):
    """Contract name is unknown or its artifact was never compiled"""

    def __init__(self, contract_name: str, reason: str = "artifact not found"):
        self.contract_name = contract_name
        self.reason = reason
        super().__init__(f"{contract_name}: {reason}")


class SubmissionError(DeploymentError):
    """Deployment transaction could not be signed or broadcast"""


class ConfirmationError(DeploymentError):
    """Deployment transaction was dropped, reverted, or never confirmed"""

    def __init__(self, message: str, tx_hash: str = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class ConfirmationTimeoutError(ConfirmationError):
    """Confirmation wait ran out of time"""


class InternalError(DeploymentError):
    """A confirmed deployment produced no usable contract address"""
