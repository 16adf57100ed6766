"""Path management utilities for evm-deploykit."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

SETTINGS_FILENAME = "compilation-settings.json"


@dataclass(frozen=True)
class ProjectPaths:
    """Directory layout of a contracts project."""

    root: Path

    @classmethod
    def from_root(cls, project_root: Optional[Union[Path, str]] = None) -> "ProjectPaths":
        """
        Build project paths from a root directory.

        Args:
            project_root: Project directory (defaults to the current directory)

        Returns:
            ProjectPaths with an absolute root
        """
        if project_root is None:
            return cls(Path.cwd())
        return cls(Path(project_root).absolute())

    @property
    def contracts_dir(self) -> Path:
        return self.root / "contracts"

    @property
    def artifacts_dir(self) -> Path:
        return self.root / "artifacts"

    @property
    def deployments_dir(self) -> Path:
        """Canonical deployment records."""
        return self.root / "deployments"

    @property
    def public_deployments_dir(self) -> Path:
        """Mirrored deployment records served to the front-end."""
        return self.root / "public" / "deployments"

    @property
    def settings_path(self) -> Path:
        return self.artifacts_dir / SETTINGS_FILENAME

    def artifact_path(self, contract_name: str) -> Path:
        return self.artifacts_dir / f"{contract_name}.json"

    def source_path(self, contract_name: str) -> Path:
        return self.contracts_dir / f"{contract_name}.sol"

    def record_paths(self, network: str) -> tuple[Path, Path]:
        """
        Get deployment record file paths for a network.

        Returns:
            Tuple of (canonical_path, mirror_path)
        """
        filename = f"{network}.json"
        return (self.deployments_dir / filename, self.public_deployments_dir / filename)
