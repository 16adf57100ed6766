"""Custom exception classes for evm-deploykit."""


class DeploymentError(Exception):
    """Base exception for compile, deploy and verify errors."""

    pass


# Configuration


class UnknownNetworkError(DeploymentError, ValueError):
    """Raised when a network name is not in the network table."""

    pass


class NoRpcConfiguredError(DeploymentError, ValueError):
    """Raised when no RPC URL is configured for the requested network."""

    pass


class NoCredentialConfiguredError(DeploymentError, ValueError):
    """Raised when no signing key is configured."""

    pass


class MissingApiKeyError(DeploymentError, ValueError):
    """Raised when no explorer API key is configured for the network family."""

    pass


# Storage


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when a compiled artifact file is not found."""

    pass


class SettingsNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when the compilation settings file is not found."""

    pass


class SourceNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when a contract source file is not found."""

    pass


class RecordNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when no deployment record exists for a network."""

    pass


class MalformedRecordError(DeploymentError, ValueError):
    """Raised when a JSON file does not match its expected shape."""

    pass


# Contract arguments


class ConstructorArgumentError(DeploymentError, ValueError):
    """Raised when constructor arguments do not fit the declared parameter types."""

    pass


# Compilation


class CompilationError(DeploymentError, RuntimeError):
    """Raised when solc reports errors or the expected contract is absent."""

    pass


# Chain interaction


class InsufficientFundsError(DeploymentError, RuntimeError):
    """Raised when the deployer account has a zero balance."""

    pass


class GasEstimationError(DeploymentError, RuntimeError):
    """Raised when the node cannot estimate gas for the creation transaction."""

    pass


class TransactionRevertedError(DeploymentError, RuntimeError):
    """Raised when the creation transaction is mined with a failed status."""

    pass


class TransactionTimeoutError(DeploymentError, TimeoutError):
    """Raised when the creation transaction is not mined in time."""

    pass


# Verification


class BytecodeMismatchError(DeploymentError, ValueError):
    """Raised when on-chain code does not contain the compiled runtime bytecode."""

    pass


class ExplorerRequestError(DeploymentError, RuntimeError):
    """Raised when the explorer API cannot be reached or returns garbage."""

    pass


class VerificationSubmissionRejectedError(DeploymentError, RuntimeError):
    """Raised when the explorer rejects a verification submission."""

    pass


class VerificationFailedError(DeploymentError, RuntimeError):
    """Raised when the explorer reports a failed verification."""

    pass


class VerificationTimeoutError(DeploymentError, TimeoutError):
    """Raised when polling ends without a terminal explorer result."""

    pass


class InvalidStateTransitionError(DeploymentError, ValueError):
    """Raised when a terminal verification status is asked to change."""

    pass
