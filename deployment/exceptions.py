class DeploymentError(Exception):
    """Base exception for deployment errors."""


class DeploymentConfigError(DeploymentError, ValueError):
    """Raised when the requested deployment is not supported by the network configuration."""


class DeploymentInvariantError(DeploymentError, AssertionError):
    """Raised when a deployed system contradicts what was requested."""


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when a contract artifact or build version cannot be found."""
