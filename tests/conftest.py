"""Shared pytest fixtures for evm-deploykit tests."""

from typing import Any, Callable, Dict
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from hexbytes import HexBytes

from evm_deploykit.artifacts import save_artifact, save_compilation_settings
from evm_deploykit.config import Config
from evm_deploykit.paths import ProjectPaths
from evm_deploykit.types import CompilationArtifact, CompilationSettings

# Well-known development key (hardhat/anvil account #0); never funded on real networks
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TX_HASH = "0x" + "ab" * 32

CREATION_BYTECODE = "0x608060405234801561001057600080fd5b5060ea8061001f6000396000f3fe"
RUNTIME_BYTECODE = "0x6080604052348015600f57600080fd5b50600436106032"
# On-chain code carries trailing metadata after the compiled runtime code
ON_CHAIN_CODE = RUNTIME_BYTECODE + "a264697066735822beef0033"

SIMPLE_STORAGE_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

contract SimpleStorage {
    uint256 private value;
    string private message;

    function set(uint256 newValue) public { value = newValue; }
    function get() public view returns (uint256) { return value; }
}
"""


@pytest.fixture
def project_paths(tmp_path) -> ProjectPaths:
    """Return a ProjectPaths rooted at a temporary project directory."""
    paths = ProjectPaths.from_root(tmp_path)
    paths.contracts_dir.mkdir(parents=True)
    return paths


@pytest.fixture
def deployer_address() -> str:
    return Account.from_key(TEST_PRIVATE_KEY).address


@pytest.fixture
def config() -> Config:
    """Configuration with RPC URLs and API keys for every test network."""
    return Config(
        rpc_urls={
            "bsc": "http://bsc-rpc.example.com",
            "bsc-testnet": "http://bsc-testnet-rpc.example.com",
            "ethereum": "http://eth-rpc.example.com",
            "sepolia": "http://sepolia-rpc.example.com",
        },
        api_keys={"bsc": "BSC-KEY", "ethereum": "ETH-KEY"},
        private_key=TEST_PRIVATE_KEY,
    )


@pytest.fixture
def simple_storage_artifact() -> CompilationArtifact:
    """Artifact of a contract whose constructor takes no arguments."""
    return CompilationArtifact(
        contract_name="SimpleStorage",
        abi=[
            {"inputs": [], "stateMutability": "nonpayable", "type": "constructor"},
            {
                "inputs": [],
                "name": "get",
                "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
                "stateMutability": "view",
                "type": "function",
            },
        ],
        bytecode=CREATION_BYTECODE,
        deployed_bytecode=RUNTIME_BYTECODE,
        metadata="{}",
    )


@pytest.fixture
def token_artifact() -> CompilationArtifact:
    """Artifact of a contract whose constructor takes (string, uint256)."""
    return CompilationArtifact(
        contract_name="Token",
        abi=[
            {
                "inputs": [
                    {"internalType": "string", "name": "name", "type": "string"},
                    {"internalType": "uint256", "name": "supply", "type": "uint256"},
                ],
                "stateMutability": "nonpayable",
                "type": "constructor",
            }
        ],
        bytecode=CREATION_BYTECODE,
        deployed_bytecode=RUNTIME_BYTECODE,
    )


@pytest.fixture
def simple_storage_settings() -> CompilationSettings:
    return CompilationSettings(
        contract_name="SimpleStorage",
        solc_version="0.8.20+commit.a1b79de6",
        optimization_enabled=True,
        optimization_runs=200,
        pragma="^0.8.20",
        license="MIT",
        deployed_bytecode=RUNTIME_BYTECODE,
        compilation_timestamp="2024-01-01T00:00:00.000Z",
    )


@pytest.fixture
def compiled_project(
    project_paths: ProjectPaths,
    simple_storage_artifact: CompilationArtifact,
    token_artifact: CompilationArtifact,
    simple_storage_settings: CompilationSettings,
) -> ProjectPaths:
    """Project with SimpleStorage and Token artifacts, settings and source."""
    save_artifact(simple_storage_artifact, project_paths)
    save_artifact(token_artifact, project_paths)
    save_compilation_settings(simple_storage_settings, project_paths)
    project_paths.source_path("SimpleStorage").write_text(SIMPLE_STORAGE_SOURCE)
    return project_paths


@pytest.fixture
def mock_web3() -> MagicMock:
    """Web3 stand-in for a funded account on BSC testnet."""
    w3 = MagicMock()
    w3.eth.get_balance.return_value = 10**18
    w3.eth.chain_id = 97
    w3.eth.gas_price = 10**10
    w3.eth.get_transaction_count.return_value = 0
    w3.eth.estimate_gas.return_value = 100_000
    w3.eth.send_raw_transaction.return_value = HexBytes(TX_HASH)
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 1,
        "contractAddress": CONTRACT_ADDRESS,
        "transactionHash": HexBytes(TX_HASH),
    }
    w3.eth.get_code.return_value = HexBytes(ON_CHAIN_CODE)
    return w3


@pytest.fixture
def web3_factory(mock_web3: MagicMock) -> Callable[[str], MagicMock]:
    """Factory returning mock_web3 and remembering the URLs it was asked for."""
    calls: Dict[str, Any] = {"urls": []}

    def factory(rpc_url: str) -> MagicMock:
        calls["urls"].append(rpc_url)
        return mock_web3

    factory.calls = calls  # type: ignore[attr-defined]
    return factory
