"""
Deployment Exceptions
Failure taxonomy shared by every deployment component
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for all deployment failures"""


class ConfigurationError(DeploymentError):
    """Configuration file or environment is invalid"""


class NetworkUnavailable(DeploymentError):
    """RPC endpoint could not be reached"""


class NoSignerAvailable(DeploymentError):
    """No signing account is configured for the selected network"""


class ArtifactNotFound(DeploymentError):
    """Named contract artifact cannot be resolved or is not deployable"""


class SubmissionError(DeploymentError):
    """Deployment transaction was rejected before entering the pending state"""


class ConfirmationError(DeploymentError):
    """Deployment transaction was dropped, reverted or timed out"""

    def __init__(self, message: str, transaction_hash: Optional[str] = None):
        super().__init__(message)
        self.transaction_hash = transaction_hash
