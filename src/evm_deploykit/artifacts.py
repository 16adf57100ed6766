"""Compiled artifact storage for evm-deploykit."""

import json
from pathlib import Path
from typing import Any

from .exceptions import (
    ArtifactNotFoundError,
    MalformedRecordError,
    SettingsNotFoundError,
    SourceNotFoundError,
)
from .paths import ProjectPaths
from .types import CompilationArtifact, CompilationSettings


def read_json(path: Path) -> Any:
    """
    Read a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedRecordError: If the file is not valid UTF-8 JSON
    """
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedRecordError(f"Invalid JSON in {path}: {e}") from e


def write_json(data: Any, path: Path) -> None:
    """
    Write data as indented JSON.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def save_artifact(artifact: CompilationArtifact, paths: ProjectPaths) -> Path:
    """
    Save a compiled artifact to artifacts/{contract_name}.json.

    Returns:
        Path the artifact was written to
    """
    artifact_path = paths.artifact_path(artifact.contract_name)
    write_json(artifact.to_dict(), artifact_path)
    return artifact_path


def load_artifact(contract_name: str, paths: ProjectPaths) -> CompilationArtifact:
    """
    Load a compiled artifact.

    Args:
        contract_name: Contract name (artifact file stem)
        paths: Project layout

    Returns:
        CompilationArtifact

    Raises:
        ArtifactNotFoundError: If the artifact has not been compiled
        MalformedRecordError: If the artifact file is invalid
    """
    artifact_path = paths.artifact_path(contract_name)
    try:
        data = read_json(artifact_path)
    except FileNotFoundError as e:
        raise ArtifactNotFoundError(
            f"Artifact for '{contract_name}' not found at {artifact_path}. "
            "Run evm-compile first."
        ) from e
    return CompilationArtifact.from_dict(data)


def save_compilation_settings(settings: CompilationSettings, paths: ProjectPaths) -> Path:
    """
    Save compilation settings to the shared settings file.

    The file holds the settings of the most recently compiled contract only.
    """
    write_json(settings.to_dict(), paths.settings_path)
    return paths.settings_path


def load_compilation_settings(paths: ProjectPaths) -> CompilationSettings:
    """
    Load the shared compilation settings.

    Raises:
        SettingsNotFoundError: If nothing has been compiled yet
        MalformedRecordError: If the settings file is invalid
    """
    try:
        data = read_json(paths.settings_path)
    except FileNotFoundError as e:
        raise SettingsNotFoundError(
            f"Compilation settings not found at {paths.settings_path}. "
            "Run evm-compile first."
        ) from e
    return CompilationSettings.from_dict(data)


def read_contract_source(contract_name: str, paths: ProjectPaths) -> str:
    """
    Read a contract's Solidity source from contracts/{contract_name}.sol.

    Raises:
        SourceNotFoundError: If the source file does not exist
    """
    source_path = paths.source_path(contract_name)
    try:
        return source_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SourceNotFoundError(f"Contract source not found at {source_path}") from e
