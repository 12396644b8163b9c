"""
Deployment Exceptions
"""


class DeploymentError(Exception):
    """Raised when a contract cannot be deployed"""


class ArtifactNotFoundError(DeploymentError):
    """Raised when no compiled artifact matches a contract name"""


class NetworkError(DeploymentError):
    """Raised when the configured network is unknown or unreachable"""
