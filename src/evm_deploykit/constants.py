"""Configuration constants for evm-deploykit."""

# Network configuration for every supported deployment target.
# This is the only place network names map to endpoints, keys and explorers.
NETWORK_CONFIG = {
    "bsc": {
        "family": "bsc",
        "chain_id": 56,
        "chain_name": "BNB Smart Chain",
        "rpc_env": "BSC_MAINNET_RPC_URL",
        "default_rpc_url": "https://bsc-dataseed.binance.org/",
        "api_key_env": "BSCSCAN_API_KEY",
        "api_url": "https://api.bscscan.com/api",
        "block_explorer_url": "https://bscscan.com",
    },
    "bsc-testnet": {
        "family": "bsc",
        "chain_id": 97,
        "chain_name": "BNB Smart Chain Testnet",
        "rpc_env": "BSC_TESTNET_RPC_URL",
        "default_rpc_url": "https://data-seed-prebsc-1-s1.binance.org:8545/",
        "api_key_env": "BSCSCAN_API_KEY",
        "api_url": "https://api-testnet.bscscan.com/api",
        "block_explorer_url": "https://testnet.bscscan.com",
    },
    "ethereum": {
        "family": "ethereum",
        "chain_id": 1,
        "chain_name": "Ethereum Mainnet",
        "rpc_env": "ETH_MAINNET_RPC_URL",
        "default_rpc_url": None,
        "api_key_env": "ETHERSCAN_API_KEY",
        "api_url": "https://api.etherscan.io/api",
        "block_explorer_url": "https://etherscan.io",
    },
    "sepolia": {
        "family": "ethereum",
        "chain_id": 11155111,
        "chain_name": "Sepolia",
        "rpc_env": "ETH_SEPOLIA_RPC_URL",
        "default_rpc_url": None,
        "api_key_env": "ETHERSCAN_API_KEY",
        "api_url": "https://api-sepolia.etherscan.io/api",
        "block_explorer_url": "https://sepolia.etherscan.io",
    },
}

DEFAULT_NETWORK = "bsc-testnet"
DEFAULT_CONTRACT_NAME = "SimpleStorage"

# Explorer license type codes
LICENSE_TYPES = {
    "MIT": "3",
    "GPL-3.0": "9",
    "Apache-2.0": "2",
    "BSD-3-Clause": "8",
    "Unlicense": "12",
}
DEFAULT_LICENSE_TYPE = LICENSE_TYPES["MIT"]

# Explorer verification constants
VERIFY_MODULE = "contract"
VERIFY_ACTION = "verifysourcecode"
CHECK_STATUS_ACTION = "checkverifystatus"
CODE_FORMAT = "solidity-single-file"
VERIFIED_RESULT = "Pass - Verified"
FAILED_RESULT_MARKER = "Fail"
UNSUPPORTED_SOLC_MESSAGE = "Invalid Or Not supported solc version"

# Compiler defaults
DEFAULT_SOLC_VERSION = "0.8.20"
OPTIMIZER_RUNS = 200
SOLC_COMMIT_VERSION_PATTERN = r"^\d+\.\d+\.\d+\+commit\.[0-9a-fA-F]+$"

# Deployment and polling
GAS_MARGIN_PERCENT = 120
POLL_INTERVAL_SECONDS = 3.0
POLL_MAX_ATTEMPTS = 20
RECEIPT_TIMEOUT_SECONDS = 120
