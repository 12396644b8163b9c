"""
Blockchain Interaction Package
Handles artifact loading, deployment transactions and confirmation
"""

from .contract_factory import ContractFactory, PendingDeployment, find_artifact
from .transaction_builder import TransactionBuilder
from .exceptions import DeploymentError, ArtifactNotFoundError, NetworkError

__all__ = [
    'ContractFactory',
    'PendingDeployment',
    'find_artifact',
    'TransactionBuilder',
    'DeploymentError',
    'ArtifactNotFoundError',
    'NetworkError'
]
