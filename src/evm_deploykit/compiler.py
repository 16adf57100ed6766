"""Solidity compilation for evm-deploykit."""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import solcx
from solcx.exceptions import SolcError, SolcNotInstalled

from .artifacts import save_artifact, save_compilation_settings
from .constants import DEFAULT_SOLC_VERSION, OPTIMIZER_RUNS
from .exceptions import CompilationError
from .paths import ProjectPaths
from .types import CompilationArtifact, CompilationSettings, utc_now_iso

logger = logging.getLogger(__name__)

_COMMIT_VERSION = re.compile(r"(\d+\.\d+\.\d+\+commit\.[0-9a-f]+)")
_SEMANTIC_VERSION = re.compile(r"(\d+\.\d+\.\d+)")
_SPDX_LICENSE = re.compile(r"SPDX-License-Identifier: (.*?)(\r?\n|\*/)")
_PRAGMA = re.compile(r"pragma solidity (.*?);")


def compiler_version() -> str:
    """
    Get the active solc version in the form block explorers expect.

    Returns:
        Commit-qualified version (e.g. "0.8.20+commit.a1b79de6"), the bare
        semantic version if no commit hash is available, or the default
        version if solc cannot be queried
    """
    try:
        full_version = str(solcx.get_solc_version(with_commit_hash=True))
    except (SolcNotInstalled, SolcError) as e:
        logger.error("Version detection failed: %s", e)
        return DEFAULT_SOLC_VERSION

    logger.debug("Full solc version: %s", full_version)

    commit_match = _COMMIT_VERSION.search(full_version)
    if commit_match:
        return commit_match.group(1)

    semantic_match = _SEMANTIC_VERSION.search(full_version)
    if semantic_match:
        logger.warning("Using semantic version only - verification may fail")
        return semantic_match.group(1)

    logger.error("Could not extract version from: %s", full_version)
    return DEFAULT_SOLC_VERSION


def extract_license(source: str) -> str:
    """Get the SPDX license identifier of a source file, or UNLICENSED."""
    match = _SPDX_LICENSE.search(source)
    return match.group(1).strip() if match else "UNLICENSED"


def extract_pragma(source: str) -> str:
    """Get the `pragma solidity` version expression of a source file."""
    match = _PRAGMA.search(source)
    return match.group(1).strip() if match else DEFAULT_SOLC_VERSION


def _standard_input(filename: str, source: str, optimizer_runs: int) -> Dict[str, Any]:
    return {
        "language": "Solidity",
        "sources": {filename: {"content": source}},
        "settings": {
            "outputSelection": {
                "*": {"*": ["abi", "evm.bytecode", "evm.deployedBytecode", "metadata"]}
            },
            "optimizer": {"enabled": True, "runs": optimizer_runs},
        },
    }


def compile_contract(
    source_path: Path,
    solc_version: str,
    optimizer_runs: int = OPTIMIZER_RUNS,
) -> Tuple[CompilationArtifact, CompilationSettings]:
    """
    Compile one Solidity file.

    The contract compiled is the one named after the file
    (contracts/Foo.sol -> Foo).

    Args:
        source_path: Path to the .sol file
        solc_version: Version recorded in the settings (commit-qualified)
        optimizer_runs: Optimizer runs setting

    Returns:
        Tuple of (artifact, settings)

    Raises:
        CompilationError: If the source is unreadable, solc reports errors or
            the contract is missing
    """
    try:
        source = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CompilationError(f"Could not read {source_path}: {e}") from e
    contract_name = source_path.stem
    filename = source_path.name

    logger.info("Compiling %s...", contract_name)

    try:
        output = solcx.compile_standard(_standard_input(filename, source, optimizer_runs))
    except SolcError as e:
        raise CompilationError(f"Compilation of {contract_name} failed: {e}") from e

    has_error = False
    for diagnostic in output.get("errors", []):
        message = diagnostic.get("formattedMessage") or diagnostic.get("message", "")
        if diagnostic.get("severity") == "error":
            has_error = True
            logger.error("%s", message)
        else:
            logger.warning("%s", message)
    if has_error:
        raise CompilationError("Compilation failed due to errors")

    contract = output.get("contracts", {}).get(filename, {}).get(contract_name)
    if not contract:
        raise CompilationError(f"Contract {contract_name} not found in compilation output")

    deployed_bytecode = contract["evm"]["deployedBytecode"]["object"]
    artifact = CompilationArtifact(
        contract_name=contract_name,
        abi=contract["abi"],
        bytecode=contract["evm"]["bytecode"]["object"],
        deployed_bytecode=deployed_bytecode,
        metadata=contract.get("metadata", ""),
    )
    settings = CompilationSettings(
        contract_name=contract_name,
        solc_version=solc_version,
        optimization_enabled=True,
        optimization_runs=optimizer_runs,
        pragma=extract_pragma(source),
        license=extract_license(source),
        deployed_bytecode=deployed_bytecode,
        compilation_timestamp=utc_now_iso(),
    )
    return artifact, settings


def compile_all(
    paths: ProjectPaths,
    solc_version: Optional[str] = DEFAULT_SOLC_VERSION,
    install: bool = True,
) -> bool:
    """
    Compile every *.sol file in the contracts directory.

    Each contract's artifact is saved to artifacts/{name}.json and its
    settings overwrite the shared compilation-settings.json.

    Args:
        paths: Project layout
        solc_version: solc release to select (None keeps the active one)
        install: Whether to install solc_version if it is missing

    Returns:
        True if every contract compiled, False otherwise
    """
    if not paths.contracts_dir.is_dir():
        logger.error("Contracts directory not found: %s", paths.contracts_dir)
        return False

    paths.artifacts_dir.mkdir(parents=True, exist_ok=True)

    if solc_version is not None:
        if install:
            solcx.install_solc(solc_version)
        solcx.set_solc_version(solc_version)

    version = compiler_version()
    logger.info("Using compiler version: %s", version)

    success = True
    for source_path in sorted(paths.contracts_dir.glob("*.sol")):
        try:
            artifact, settings = compile_contract(source_path, version)
        except CompilationError as e:
            logger.error("Compilation failed: %s", e)
            success = False
            continue

        artifact_path = save_artifact(artifact, paths)
        save_compilation_settings(settings, paths)
        logger.info("Successfully compiled %s", artifact.contract_name)
        logger.info("Artifacts saved to %s", artifact_path)

    return success
