"""Deployment record storage for evm-deploykit."""

import logging
from pathlib import Path

from .artifacts import read_json, write_json
from .exceptions import RecordNotFoundError
from .paths import ProjectPaths
from .types import DeploymentRecord, VerificationStatus

logger = logging.getLogger(__name__)


class DeploymentRecordStore:
    """
    Stores one deployment record per network.

    Records live in deployments/{network}.json and are mirrored to
    public/deployments/{network}.json for the front-end. A second deployment
    to the same network replaces the previous record.
    """

    def __init__(self, paths: ProjectPaths):
        self._paths = paths

    def canonical_path(self, network: str) -> Path:
        return self._paths.record_paths(network)[0]

    def mirror_path(self, network: str) -> Path:
        return self._paths.record_paths(network)[1]

    def exists(self, network: str) -> bool:
        return self.canonical_path(network).exists()

    def save(self, record: DeploymentRecord) -> None:
        """
        Write a record to the canonical location, then to the mirror.

        A failure between the two writes leaves the mirror stale; it is not
        reconciled.
        """
        canonical_path, mirror_path = self._paths.record_paths(record.network)
        data = record.to_dict()

        write_json(data, canonical_path)
        logger.info("Deployment info saved to %s", canonical_path)

        write_json(data, mirror_path)
        logger.info("Deployment info copied to %s", mirror_path)

    def load(self, network: str) -> DeploymentRecord:
        """
        Load the record for a network.

        Raises:
            RecordNotFoundError: If nothing has been deployed to network
            MalformedRecordError: If the record file is invalid
        """
        path = self.canonical_path(network)
        try:
            data = read_json(path)
        except FileNotFoundError as e:
            raise RecordNotFoundError(
                f"No deployment record for network '{network}' at {path}. "
                "Run evm-deploy first."
            ) from e
        return DeploymentRecord.from_dict(data)

    def update_verification(self, network: str, status: VerificationStatus) -> DeploymentRecord:
        """
        Replace the verification status embedded in a network's record.

        Re-reads the canonical file so concurrent edits to other fields are
        kept. Only the canonical copy is updated.

        Returns:
            The updated record
        """
        record = self.load(network).with_verification(status)
        write_json(record.to_dict(), self.canonical_path(network))
        return record
