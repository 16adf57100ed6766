"""
evm-deploykit: compile, deploy and verify Solidity contracts on EVM networks
"""

from importlib.metadata import PackageNotFoundError, version

from .compiler import compile_all
from .config import Config
from .deployer import DeploymentResult, deploy, run_deployment
from .exceptions import (
    ArtifactNotFoundError,
    BytecodeMismatchError,
    DeploymentError,
    InsufficientFundsError,
    MalformedRecordError,
    NoCredentialConfiguredError,
    NoRpcConfiguredError,
    UnknownNetworkError,
    VerificationFailedError,
    VerificationSubmissionRejectedError,
    VerificationTimeoutError,
)
from .paths import ProjectPaths
from .records import DeploymentRecordStore
from .types import (
    CompilationArtifact,
    CompilationSettings,
    DeploymentRecord,
    VerificationState,
    VerificationStatus,
)
from .verification import RetryPolicy, poll, submit, verify_contract

try:
    __version__ = version("evm-deploykit")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "Config",
    "ProjectPaths",
    "compile_all",
    "deploy",
    "run_deployment",
    "DeploymentResult",
    "DeploymentRecordStore",
    "submit",
    "poll",
    "verify_contract",
    "RetryPolicy",
    "CompilationArtifact",
    "CompilationSettings",
    "DeploymentRecord",
    "VerificationState",
    "VerificationStatus",
    "DeploymentError",
    "ArtifactNotFoundError",
    "BytecodeMismatchError",
    "InsufficientFundsError",
    "MalformedRecordError",
    "NoCredentialConfiguredError",
    "NoRpcConfiguredError",
    "UnknownNetworkError",
    "VerificationFailedError",
    "VerificationSubmissionRejectedError",
    "VerificationTimeoutError",
]
