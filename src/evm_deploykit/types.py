"""Data types and dataclasses for evm-deploykit."""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .constants import SOLC_COMMIT_VERSION_PATTERN
from .exceptions import InvalidStateTransitionError, MalformedRecordError


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _require(data: Any, key: str, expected: Tuple[type, ...], kind: str) -> Any:
    """
    Fetch a required key from a decoded JSON object, checking its type.

    Raises:
        MalformedRecordError: If data is not a dict, the key is missing,
                              or the value has the wrong type
    """
    if not isinstance(data, dict):
        raise MalformedRecordError(f"{kind} must be a JSON object, got {type(data).__name__}")
    if key not in data:
        raise MalformedRecordError(f"{kind} is missing required field '{key}'")
    value = data[key]
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and bool not in expected:
        raise MalformedRecordError(f"{kind} field '{key}' has invalid type bool")
    if not isinstance(value, expected):
        raise MalformedRecordError(
            f"{kind} field '{key}' has invalid type {type(value).__name__}"
        )
    return value


def _optional(data: Any, key: str, expected: Tuple[type, ...], kind: str) -> Any:
    if isinstance(data, dict) and data.get(key) is None:
        return None
    return _require(data, key, expected, kind)


@dataclass(frozen=True)
class CompilationArtifact:
    """Compiled output of one contract."""

    contract_name: str
    abi: List[Dict[str, Any]]
    bytecode: str  # Creation bytecode, hex
    deployed_bytecode: str  # Runtime bytecode, hex
    metadata: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "CompilationArtifact":
        kind = "Artifact"
        abi = _require(data, "abi", (list,), kind)
        if not all(isinstance(item, dict) for item in abi):
            raise MalformedRecordError("Artifact field 'abi' must be a list of objects")
        return cls(
            contract_name=_require(data, "contractName", (str,), kind),
            abi=abi,
            bytecode=_require(data, "bytecode", (str,), kind),
            deployed_bytecode=_require(data, "deployedBytecode", (str,), kind),
            metadata=_optional(data, "metadata", (str,), kind) or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contractName": self.contract_name,
            "abi": self.abi,
            "bytecode": self.bytecode,
            "deployedBytecode": self.deployed_bytecode,
            "metadata": self.metadata,
        }

    def constructor_abi(self) -> Optional[Dict[str, Any]]:
        """Return the constructor entry of the ABI, if declared."""
        for item in self.abi:
            if item.get("type") == "constructor":
                return item
        return None


@dataclass(frozen=True)
class CompilationSettings:
    """Compiler settings recorded alongside the most recent compile."""

    contract_name: str
    solc_version: str  # e.g. "0.8.20+commit.a1b79de6"
    optimization_enabled: bool
    optimization_runs: int
    pragma: str
    license: str
    deployed_bytecode: str
    compilation_timestamp: str

    def has_commit_version(self) -> bool:
        """Whether solc_version carries the commit hash explorers expect."""
        return re.match(SOLC_COMMIT_VERSION_PATTERN, self.solc_version) is not None

    @classmethod
    def from_dict(cls, data: Any) -> "CompilationSettings":
        kind = "Compilation settings"
        optimization = _require(data, "optimization", (dict,), kind)
        return cls(
            contract_name=_require(data, "contractName", (str,), kind),
            solc_version=_require(data, "solcVersion", (str,), kind),
            optimization_enabled=_require(optimization, "enabled", (bool,), "Optimization"),
            optimization_runs=_require(optimization, "runs", (int,), "Optimization"),
            pragma=_require(data, "pragma", (str,), kind),
            license=_require(data, "license", (str,), kind),
            deployed_bytecode=_require(data, "deployedBytecode", (str,), kind),
            compilation_timestamp=_require(data, "compilationTimestamp", (str,), kind),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contractName": self.contract_name,
            "solcVersion": self.solc_version,
            "optimization": {
                "enabled": self.optimization_enabled,
                "runs": self.optimization_runs,
            },
            "pragma": self.pragma,
            "license": self.license,
            "deployedBytecode": self.deployed_bytecode,
            "compilationTimestamp": self.compilation_timestamp,
        }


class VerificationState(Enum):
    """
    Explorer verification states.

    SUBMITTED is initial; the rest are terminal.
    """

    SUBMITTED = "submitted"
    VERIFIED = "verified"
    FAILED = "failed"
    TIMEOUT = "timeout"

    @property
    def is_terminal(self) -> bool:
        return self is not VerificationState.SUBMITTED


@dataclass(frozen=True)
class VerificationStatus:
    """Explorer verification state embedded in a deployment record."""

    status: VerificationState
    guid: str
    submitted_at: str
    compiler_version: str
    explorer_url: str
    verified_at: Optional[str] = None
    failure_reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def transition(
        self,
        status: VerificationState,
        failure_reason: Optional[str] = None,
        now: Optional[str] = None,
    ) -> "VerificationStatus":
        """
        Return a copy moved to a new state.

        Raises:
            InvalidStateTransitionError: If this status is already terminal
        """
        if self.is_terminal:
            raise InvalidStateTransitionError(
                f"Verification {self.guid} is already {self.status.value}"
            )
        verified_at = self.verified_at
        if status is VerificationState.VERIFIED:
            verified_at = now or utc_now_iso()
        return replace(
            self, status=status, verified_at=verified_at, failure_reason=failure_reason
        )

    @classmethod
    def from_dict(cls, data: Any) -> "VerificationStatus":
        kind = "Verification"
        raw_status = _require(data, "status", (str,), kind)
        try:
            status = VerificationState(raw_status)
        except ValueError as e:
            raise MalformedRecordError(f"Unknown verification status '{raw_status}'") from e
        return cls(
            status=status,
            guid=_require(data, "guid", (str,), kind),
            submitted_at=_require(data, "submittedAt", (str,), kind),
            compiler_version=_require(data, "compilerVersion", (str,), kind),
            explorer_url=_require(data, "explorerUrl", (str,), kind),
            verified_at=_optional(data, "verifiedAt", (str,), kind),
            failure_reason=_optional(data, "failureReason", (str,), kind),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "guid": self.guid,
            "submittedAt": self.submitted_at,
            "compilerVersion": self.compiler_version,
            "explorerUrl": self.explorer_url,
            "verifiedAt": self.verified_at,
            "failureReason": self.failure_reason,
        }


@dataclass(frozen=True)
class DeploymentRecord:
    """A contract deployed to one network."""

    # Required fields
    contract_name: str
    contract_address: str  # Checksummed address
    deployment_tx_hash: str
    deployer_address: str
    network: str  # Key into NETWORK_CONFIG
    chain_id: int  # As reported by the endpoint, not assumed
    timestamp: str

    constructor_args: List[str] = field(default_factory=list)
    constructor_types: List[str] = field(default_factory=list)
    encoded_constructor_args: str = ""  # Hex without 0x prefix

    verification: Optional[VerificationStatus] = None

    def with_verification(self, verification: Optional[VerificationStatus]) -> "DeploymentRecord":
        """Return a copy with its verification status replaced."""
        return replace(self, verification=verification)

    @classmethod
    def from_dict(cls, data: Any) -> "DeploymentRecord":
        kind = "Deployment record"
        constructor_args = _optional(data, "constructorArgs", (list,), kind) or []
        constructor_types = _optional(data, "constructorTypes", (list,), kind) or []
        if not all(isinstance(t, str) for t in constructor_types):
            raise MalformedRecordError("Deployment record 'constructorTypes' must be strings")
        verification_data = data.get("verification")
        return cls(
            contract_name=_require(data, "contractName", (str,), kind),
            contract_address=_require(data, "contractAddress", (str,), kind),
            deployment_tx_hash=_require(data, "deploymentTx", (str,), kind),
            deployer_address=_require(data, "deployer", (str,), kind),
            network=_require(data, "network", (str,), kind),
            chain_id=_require(data, "chainId", (int,), kind),
            timestamp=_require(data, "timestamp", (str,), kind),
            constructor_args=[str(arg) for arg in constructor_args],
            constructor_types=list(constructor_types),
            encoded_constructor_args=_optional(data, "encodedConstructorArgs", (str,), kind) or "",
            verification=(
                VerificationStatus.from_dict(verification_data)
                if verification_data is not None
                else None
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "contractName": self.contract_name,
            "contractAddress": self.contract_address,
            "deploymentTx": self.deployment_tx_hash,
            "deployer": self.deployer_address,
            "network": self.network,
            "chainId": self.chain_id,
            "timestamp": self.timestamp,
            "constructorArgs": list(self.constructor_args),
            "constructorTypes": list(self.constructor_types),
            "encodedConstructorArgs": self.encoded_constructor_args,
        }
        if self.verification is not None:
            result["verification"] = self.verification.to_dict()
        return result


@dataclass(frozen=True)
class NetworkInfo:
    """Resolved endpoints for one network."""

    name: str
    family: str  # "bsc" or "ethereum"
    chain_id: int  # Nominal chain ID from the network table
    chain_name: str
    rpc_url: str
    api_url: str
    block_explorer_url: str

    def explorer_url(self, address: str) -> str:
        """Explorer page for a contract's verified source."""
        return f"{self.block_explorer_url}/address/{address}#contracts"
