"""
Blockchain Interaction Package
Handles signers, artifact resolution, transaction building and deployment
"""

from .contract_manager import ContractManager, ContractArtifact
from .contract_factory import ContractFactory, PendingDeployment, DeployedContract
from .transaction_builder import TransactionBuilder
from .wallet_manager import WalletManager, LocalSigner, NodeSigner
from .exceptions import (
    DeploymentError,
    ConfigurationError,
    NetworkUnavailable,
    NoSignerAvailable,
    ArtifactNotFound,
    SubmissionError,
    ConfirmationError
)

__all__ = [
    'ContractManager',
    'ContractArtifact',
    'ContractFactory',
    'PendingDeployment',
    'DeployedContract',
    'TransactionBuilder',
    'WalletManager',
    'LocalSigner',
    'NodeSigner',
    'DeploymentError',
    'ConfigurationError',
    'NetworkUnavailable',
    'NoSignerAvailable',
    'ArtifactNotFound',
    'SubmissionError',
    'ConfirmationError'
]
