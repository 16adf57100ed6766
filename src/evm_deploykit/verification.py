"""Explorer source verification for evm-deploykit."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from web3 import Web3

from .abi import encode_constructor_args, strip_hex_prefix
from .artifacts import load_compilation_settings, read_contract_source
from .config import Config
from .constants import (
    CODE_FORMAT,
    DEFAULT_LICENSE_TYPE,
    FAILED_RESULT_MARKER,
    LICENSE_TYPES,
    POLL_INTERVAL_SECONDS,
    POLL_MAX_ATTEMPTS,
    UNSUPPORTED_SOLC_MESSAGE,
    VERIFIED_RESULT,
    VERIFY_ACTION,
    VERIFY_MODULE,
)
from .deployer import Web3Factory, http_web3
from .exceptions import (
    BytecodeMismatchError,
    DeploymentError,
    InvalidStateTransitionError,
    VerificationFailedError,
    VerificationSubmissionRejectedError,
    VerificationTimeoutError,
)
from .explorer import ExplorerClient
from .networks import api_key_for, resolve_network
from .paths import ProjectPaths
from .records import DeploymentRecordStore
from .types import (
    CompilationSettings,
    DeploymentRecord,
    VerificationState,
    VerificationStatus,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


def license_type(license: Optional[str]) -> str:
    """Map an SPDX identifier to the explorer's license type code (MIT if unknown)."""
    return LICENSE_TYPES.get(license or "", DEFAULT_LICENSE_TYPE)


def check_bytecode(deployed_code: str, compiled_deployed_bytecode: str) -> None:
    """
    Check that on-chain code contains the compiled runtime bytecode.

    Containment rather than equality tolerates metadata and immutable
    references that differ between the two.

    Raises:
        BytecodeMismatchError: If the compiled bytecode is not contained
    """
    on_chain = strip_hex_prefix(deployed_code).lower()
    compiled = strip_hex_prefix(compiled_deployed_bytecode).lower()
    if not on_chain:
        raise BytecodeMismatchError("No contract code found at the deployed address")
    if not compiled or compiled not in on_chain:
        raise BytecodeMismatchError("Deployed bytecode does not match compiled bytecode")


def resolve_constructor_args(record: DeploymentRecord) -> str:
    """
    Get the ABI-encoded constructor arguments for a deployment.

    Uses the encoding stored at deploy time, re-encoding from the record's
    types and values if it is absent.
    """
    if record.encoded_constructor_args:
        logger.info("Using pre-encoded constructor arguments")
        return strip_hex_prefix(record.encoded_constructor_args)
    return encode_constructor_args(record.constructor_types, record.constructor_args)


def build_verification_payload(
    api_key: str,
    contract_address: str,
    source_code: str,
    settings: CompilationSettings,
    encoded_constructor_args: str,
) -> Dict[str, str]:
    """Assemble the form fields of a verifysourcecode request."""
    return {
        "apikey": api_key,
        "module": VERIFY_MODULE,
        "action": VERIFY_ACTION,
        "contractaddress": contract_address,
        "sourceCode": source_code,
        "codeformat": CODE_FORMAT,
        "contractname": settings.contract_name,
        "compilerversion": "v" + settings.solc_version,
        "optimizationUsed": "1" if settings.optimization_enabled else "0",
        "runs": str(settings.optimization_runs),
        "constructorArguements": encoded_constructor_args,  # sic, the API's spelling
        "licenseType": license_type(settings.license),
    }


def _persist_status(
    store: DeploymentRecordStore, network: str, status: VerificationStatus
) -> None:
    # Never let a storage failure replace the verification outcome
    try:
        store.update_verification(network, status)
    except (DeploymentError, OSError) as e:
        logger.warning("Could not update verification status: %s", e)


def _log_version_hint(settings: CompilationSettings) -> None:
    logger.error("Compiler version not supported by block explorer")
    logger.error("Current version format: %s", settings.solc_version)
    logger.error("Explorers expect format: 0.8.20+commit.a1b79de6")
    logger.error("Solution: recompile, redeploy and verify again")


def submit(
    config: Config,
    network: str,
    record: DeploymentRecord,
    settings: CompilationSettings,
    paths: Optional[ProjectPaths] = None,
    web3_factory: Web3Factory = http_web3,
    client: Optional[ExplorerClient] = None,
    store: Optional[DeploymentRecordStore] = None,
) -> VerificationStatus:
    """
    Submit a deployed contract's source for explorer verification.

    Args:
        config: Process configuration
        network: Network the contract is deployed on
        record: Deployment record of the contract
        settings: Settings the contract was compiled with
        paths: Project layout (defaults to the current directory)
        web3_factory: Builds a Web3 client for an RPC URL
        client: Explorer client (built from the network table if None)
        store: Record store the submitted status is written to

    Returns:
        The initial "submitted" VerificationStatus carrying the submission GUID

    Raises:
        UnknownNetworkError, NoRpcConfiguredError, MissingApiKeyError:
            If the network is not fully configured
        BytecodeMismatchError: If the deployed code does not match the build
        SourceNotFoundError: If the contract source is missing
        ExplorerRequestError: If the explorer cannot be reached
        VerificationSubmissionRejectedError: If the explorer rejects the request
    """
    if paths is None:
        paths = ProjectPaths.from_root()
    if store is None:
        store = DeploymentRecordStore(paths)

    network_info = resolve_network(config, network)
    api_key = api_key_for(config, network)
    if client is None:
        client = ExplorerClient(network_info.api_url, api_key)

    logger.info("Using compiler version: %s", settings.solc_version)
    if not settings.has_commit_version():
        logger.warning("Version missing commit hash - this may cause verification failure")
        logger.warning("Current version: %s", settings.solc_version)
        logger.warning("Expected format: 0.8.20+commit.a1b79de6")

    if record.contract_name != settings.contract_name:
        logger.warning(
            "Compilation settings are for %s but the %s record is for %s",
            settings.contract_name,
            network,
            record.contract_name,
        )

    logger.info("Verifying bytecode match...")
    w3 = web3_factory(network_info.rpc_url)
    deployed_code = Web3.to_hex(w3.eth.get_code(record.contract_address))
    check_bytecode(deployed_code, settings.deployed_bytecode)

    encoded_args = resolve_constructor_args(record)
    source_code = read_contract_source(settings.contract_name, paths)
    payload = build_verification_payload(
        api_key, record.contract_address, source_code, settings, encoded_args
    )
    logger.info(
        "Verification parameters: compiler=%s optimization=%s runs=%s constructorArgs=%s",
        payload["compilerversion"],
        payload["optimizationUsed"],
        payload["runs"],
        payload["constructorArguements"],
    )

    logger.info("Submitting verification to %s...", client.api_base)
    response = client.submit_verification(payload)
    if not response.ok:
        if UNSUPPORTED_SOLC_MESSAGE in f"{response.message} {response.result_text}":
            _log_version_hint(settings)
        raise VerificationSubmissionRejectedError(
            f"Verification submission failed: {response.message} ({response.result_text})"
        )

    guid = response.result_text
    logger.info("Verification submitted. GUID: %s", guid)

    status = VerificationStatus(
        status=VerificationState.SUBMITTED,
        guid=guid,
        submitted_at=utc_now_iso(),
        compiler_version=settings.solc_version,
        explorer_url=network_info.explorer_url(record.contract_address),
    )
    _persist_status(store, network, status)
    return status


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-interval polling schedule.

    Every attempt is preceded by one interval; there is no backoff.
    """

    interval: float = POLL_INTERVAL_SECONDS
    max_attempts: int = POLL_MAX_ATTEMPTS

    @staticmethod
    def classify(result: str) -> Optional[VerificationState]:
        """
        Map a checkverifystatus result to a terminal state.

        Returns:
            VERIFIED, FAILED, or None if the result is not terminal
        """
        if result == VERIFIED_RESULT:
            return VerificationState.VERIFIED
        if FAILED_RESULT_MARKER in result:
            return VerificationState.FAILED
        return None


def poll(
    network: str,
    record: DeploymentRecord,
    client: ExplorerClient,
    store: DeploymentRecordStore,
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> VerificationStatus:
    """
    Poll the explorer until a submission reaches a terminal state.

    Args:
        network: Network the contract is deployed on
        record: Deployment record carrying the submitted status
        client: Explorer client
        store: Record store each transition is written to
        policy: Polling schedule (3 s x 20 attempts by default)
        sleep: Suspends for a number of seconds

    Returns:
        Terminal VerificationStatus (verified, failed or timeout)

    Raises:
        InvalidStateTransitionError: If the record has no pending submission
        ExplorerRequestError: If the explorer cannot be reached
    """
    if policy is None:
        policy = RetryPolicy()

    status = record.verification
    if status is None:
        raise InvalidStateTransitionError(
            f"No verification submission to poll for {record.contract_name} on {network}"
        )
    if status.is_terminal:
        return status

    for attempt in range(1, policy.max_attempts + 1):
        sleep(policy.interval)

        result = client.check_status(status.guid).result_text
        logger.info("Check %d: %s", attempt, result)

        state = policy.classify(result)
        if state is VerificationState.VERIFIED:
            status = status.transition(state)
            _persist_status(store, network, status)
            logger.info("Contract verified successfully!")
            logger.info("View verified contract: %s", status.explorer_url)
            return status
        if state is VerificationState.FAILED:
            status = status.transition(state, failure_reason=result)
            _persist_status(store, network, status)
            return status

    status = status.transition(VerificationState.TIMEOUT)
    _persist_status(store, network, status)
    return status


def verify_contract(
    config: Config,
    contract_name: str,
    network: str,
    paths: Optional[ProjectPaths] = None,
    web3_factory: Web3Factory = http_web3,
    client: Optional[ExplorerClient] = None,
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> VerificationStatus:
    """
    Verify a deployed contract: submit its source, then poll to completion.

    Args:
        config: Process configuration
        contract_name: Contract expected in the network's deployment record
        network: Network the contract is deployed on
        paths: Project layout (defaults to the current directory)
        web3_factory: Builds a Web3 client for an RPC URL
        client: Explorer client (built from the network table if None)
        policy: Polling schedule
        sleep: Suspends for a number of seconds

    Returns:
        The verified VerificationStatus

    Raises:
        VerificationFailedError: If the explorer reports a failure
        VerificationTimeoutError: If polling ends without a result
        Any error raised by submit()
    """
    if paths is None:
        paths = ProjectPaths.from_root()
    store = DeploymentRecordStore(paths)

    logger.info("Verifying %s on %s...", contract_name, network)
    settings = load_compilation_settings(paths)
    record = store.load(network)
    if record.contract_name != contract_name:
        logger.warning(
            "The %s record is for %s, not %s", network, record.contract_name, contract_name
        )

    if client is None:
        network_info = resolve_network(config, network)
        client = ExplorerClient(network_info.api_url, api_key_for(config, network))

    submitted = submit(
        config,
        network,
        record,
        settings,
        paths=paths,
        web3_factory=web3_factory,
        client=client,
        store=store,
    )
    status = poll(
        network,
        record.with_verification(submitted),
        client,
        store,
        policy=policy,
        sleep=sleep,
    )

    if status.status is VerificationState.FAILED:
        raise VerificationFailedError(f"Verification failed: {status.failure_reason}")
    if status.status is VerificationState.TIMEOUT:
        raise VerificationTimeoutError(
            f"Verification timeout after {(policy or RetryPolicy()).max_attempts} checks"
        )
    return status
