"""Command-line entry points: evm-compile, evm-deploy, evm-verify."""

import argparse
import logging
import os
from typing import List, Optional

import requests
from dotenv import load_dotenv
from web3.exceptions import Web3Exception

from .compiler import compile_all
from .config import Config
from .constants import DEFAULT_CONTRACT_NAME, DEFAULT_SOLC_VERSION
from .deployer import run_deployment
from .exceptions import DeploymentError
from .logging_setup import setup_logging
from .paths import ProjectPaths
from .verification import verify_contract

logger = logging.getLogger(__name__)


def _base_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--project-dir",
        dest="project_dir",
        default=None,
        help="Project directory holding contracts/ and artifacts/ (default: cwd)",
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        default=".env",
        help="dotenv file to load before reading the environment (default: .env)",
    )
    parser.add_argument("--log-level", dest="log_level", default="INFO", help="Log level")
    return parser


def _load_config(args: argparse.Namespace) -> Config:
    load_dotenv(args.env_file)
    return Config.from_env(os.environ)


def compile_main(argv: Optional[List[str]] = None) -> int:
    parser = _base_parser("Compile every contract in contracts/")
    parser.add_argument(
        "--solc-version",
        dest="solc_version",
        default=DEFAULT_SOLC_VERSION,
        help=f"solc release to compile with (default: {DEFAULT_SOLC_VERSION})",
    )
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    paths = ProjectPaths.from_root(args.project_dir)
    return 0 if compile_all(paths, solc_version=args.solc_version) else 1


def deploy_main(argv: Optional[List[str]] = None) -> int:
    parser = _base_parser("Deploy a compiled contract")
    parser.add_argument("contract", nargs="?", default=DEFAULT_CONTRACT_NAME, help="Contract name")
    parser.add_argument(
        "network", nargs="?", default=None, help="Target network (default: $NETWORK or bsc-testnet)"
    )
    parser.add_argument("constructor_args", nargs="*", help="Constructor arguments")
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    config = _load_config(args)
    result = run_deployment(
        config,
        args.contract,
        args.network or config.default_network,
        args.constructor_args,
        paths=ProjectPaths.from_root(args.project_dir),
    )
    if not result.success:
        return 1

    print(result.contract_address)
    return 0


def verify_main(argv: Optional[List[str]] = None) -> int:
    parser = _base_parser("Verify a deployed contract on the network's block explorer")
    parser.add_argument("contract", nargs="?", default=DEFAULT_CONTRACT_NAME, help="Contract name")
    parser.add_argument(
        "network", nargs="?", default=None, help="Target network (default: $NETWORK or bsc-testnet)"
    )
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    config = _load_config(args)
    try:
        verify_contract(
            config,
            args.contract,
            args.network or config.default_network,
            paths=ProjectPaths.from_root(args.project_dir),
        )
    except (DeploymentError, Web3Exception, requests.RequestException, OSError) as e:
        logger.error("Verification failed: %s", e)
        return 1
    return 0
