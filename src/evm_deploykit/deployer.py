"""Contract deployment for evm-deploykit."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

import requests
from eth_account import Account
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from .abi import constructor_types, encode_constructor_args, strip_hex_prefix
from .artifacts import load_artifact
from .config import Config
from .constants import GAS_MARGIN_PERCENT, RECEIPT_TIMEOUT_SECONDS
from .exceptions import (
    DeploymentError,
    GasEstimationError,
    InsufficientFundsError,
    NoCredentialConfiguredError,
    TransactionRevertedError,
    TransactionTimeoutError,
)
from .networks import resolve_network
from .paths import ProjectPaths
from .records import DeploymentRecordStore
from .types import DeploymentRecord, utc_now_iso

logger = logging.getLogger(__name__)

Web3Factory = Callable[[str], Web3]


def http_web3(rpc_url: str) -> Web3:
    """Connect to an RPC endpoint over HTTP."""
    return Web3(Web3.HTTPProvider(rpc_url))


def gas_limit_with_margin(estimate: int) -> int:
    """Apply the deployment safety margin to a gas estimate (floor division)."""
    return estimate * GAS_MARGIN_PERCENT // 100


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of a deploy invocation as reported by the CLI."""

    success: bool
    contract_address: Optional[str] = None
    deployment_tx: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "contractAddress": self.contract_address,
                "deploymentTx": self.deployment_tx,
            }
        return {"success": False, "error": self.error}


def deploy(
    config: Config,
    contract_name: str,
    network: str,
    constructor_args: Sequence[str] = (),
    paths: Optional[ProjectPaths] = None,
    web3_factory: Web3Factory = http_web3,
    store: Optional[DeploymentRecordStore] = None,
) -> DeploymentRecord:
    """
    Deploy a compiled contract and record the deployment.

    Args:
        config: Process configuration (RPC URLs, signing key)
        contract_name: Name of a compiled artifact
        network: Target network name
        constructor_args: Constructor arguments as strings
        paths: Project layout (defaults to the current directory)
        web3_factory: Builds a Web3 client for an RPC URL
        store: Record store (defaults to one over paths)

    Returns:
        DeploymentRecord that was persisted

    Raises:
        ArtifactNotFoundError: If the contract has not been compiled
        UnknownNetworkError: If network is not supported
        NoRpcConfiguredError: If no RPC URL is configured for network
        NoCredentialConfiguredError: If no signing key is configured
        InsufficientFundsError: If the deployer balance is zero
        ConstructorArgumentError: If the arguments do not fit the constructor
        GasEstimationError: If the node cannot estimate the creation transaction
        TransactionRevertedError: If the creation transaction fails on-chain
        TransactionTimeoutError: If the transaction is not mined in time
    """
    if paths is None:
        paths = ProjectPaths.from_root()
    if store is None:
        store = DeploymentRecordStore(paths)

    logger.info("Deploying %s...", contract_name)
    artifact = load_artifact(contract_name, paths)

    logger.info("Target network: %s", network)
    network_info = resolve_network(config, network)

    if not config.private_key:
        raise NoCredentialConfiguredError("No private key found in configuration (set $PRIVATE_KEY)")

    try:
        account = Account.from_key(config.private_key)
    except ValueError as e:
        raise NoCredentialConfiguredError(f"Configured private key is invalid: {e}") from e

    w3 = web3_factory(network_info.rpc_url)
    deployer_address = account.address
    logger.info("Deployer address: %s", deployer_address)

    balance = w3.eth.get_balance(deployer_address)
    logger.info("Deployer balance: %s", Web3.from_wei(balance, "ether"))
    if balance == 0:
        raise InsufficientFundsError(
            f"Deployer {deployer_address} has no funds on {network}. "
            "Please fund your account first."
        )

    # The endpoint's chain may differ from the nominal one for the label
    chain_id = w3.eth.chain_id
    logger.info("Connected to chain ID: %s", chain_id)
    if chain_id != network_info.chain_id:
        logger.warning(
            "Endpoint reports chain ID %s but %s is chain ID %s",
            chain_id,
            network,
            network_info.chain_id,
        )

    types = constructor_types(artifact.abi)
    encoded_args = encode_constructor_args(types, list(constructor_args))
    data = "0x" + strip_hex_prefix(artifact.bytecode) + encoded_args

    try:
        estimate = w3.eth.estimate_gas({"from": deployer_address, "data": data})
    except (Web3Exception, ValueError) as e:
        raise GasEstimationError(f"Gas estimation failed: {e}") from e
    gas_limit = gas_limit_with_margin(estimate)
    logger.info("Estimated gas: %s (limit %s)", estimate, gas_limit)

    transaction = {
        "from": deployer_address,
        "data": data,
        "value": 0,
        "gas": gas_limit,
        "gasPrice": w3.eth.gas_price,
        "nonce": w3.eth.get_transaction_count(deployer_address),
        "chainId": chain_id,
    }
    signed = account.sign_transaction(transaction)
    tx_hash = Web3.to_hex(w3.eth.send_raw_transaction(signed.raw_transaction))
    logger.info("Contract deployment transaction hash: %s", tx_hash)

    logger.info("Waiting for deployment confirmation...")
    try:
        receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT_SECONDS)
    except TimeExhausted as e:
        raise TransactionTimeoutError(f"Transaction {tx_hash} was not mined: {e}") from e
    if receipt["status"] == 0:
        raise TransactionRevertedError(f"Transaction {tx_hash} reverted")

    contract_address = receipt["contractAddress"]
    logger.info("Contract deployed to: %s", contract_address)

    record = DeploymentRecord(
        contract_name=contract_name,
        contract_address=contract_address,
        deployment_tx_hash=tx_hash,
        deployer_address=deployer_address,
        network=network,
        chain_id=chain_id,
        timestamp=utc_now_iso(),
        constructor_args=[str(arg) for arg in constructor_args],
        constructor_types=types,
        encoded_constructor_args=encoded_args,
    )
    if store.exists(network):
        logger.warning("Overwriting the existing %s deployment record", network)
    store.save(record)
    return record


def run_deployment(
    config: Config,
    contract_name: str,
    network: str,
    constructor_args: Sequence[str] = (),
    paths: Optional[ProjectPaths] = None,
    web3_factory: Web3Factory = http_web3,
) -> DeploymentResult:
    """
    Deploy a contract, reporting failure as a result instead of raising.

    Returns:
        DeploymentResult with the address and transaction hash on success,
        or the error message on failure
    """
    try:
        record = deploy(
            config,
            contract_name,
            network,
            constructor_args,
            paths=paths,
            web3_factory=web3_factory,
        )
    except (DeploymentError, Web3Exception, requests.RequestException, OSError) as e:
        logger.error("Deployment failed: %s", e)
        if isinstance(e, InsufficientFundsError):
            logger.error("Make sure your account has enough funds for deployment")
        return DeploymentResult(success=False, error=str(e))

    return DeploymentResult(
        success=True,
        contract_address=record.contract_address,
        deployment_tx=record.deployment_tx_hash,
    )
