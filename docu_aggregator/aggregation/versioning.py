"""Version stamps of aggregated builds.

The version stamp is the last file written by a successful aggregation.
Its presence marks a build as aggregated; its value tells whether the
aggregated files still have the current format.
"""

from typing import Optional

from docu_aggregator.domain.constants import CURRENT_FILE_FORMAT_VERSION
from docu_aggregator.domain.enums import BuildImportStatus
from docu_aggregator.domain.models import BuildIdentifier
from docu_aggregator.output.aggregation_dao import ScenarioDocuAggregationDAO


def determine_import_status(version: Optional[str], upstream_failed: bool,
                            current_version: str = CURRENT_FILE_FORMAT_VERSION) -> BuildImportStatus:
    """
    Combine the version stamp and the upstream failure flag into a status.

    Precedence: FAILED > OUTDATED > SUCCESS > UNPROCESSED. A failed import
    is reported as failed even when older aggregated data is current.

    Args:
        version: Stored version stamp, None or blank if never aggregated.
        upstream_failed: Whether the import of the build itself failed.
        current_version: Version the stamp must equal exactly.
    """
    aggregated = bool(version and version.strip())
    outdated = aggregated and version != current_version
    if upstream_failed:
        return BuildImportStatus.FAILED
    if outdated:
        return BuildImportStatus.OUTDATED
    if aggregated:
        return BuildImportStatus.SUCCESS
    return BuildImportStatus.UNPROCESSED


class VersionController:
    """Decides whether the aggregated data of a build can be trusted."""

    def __init__(self, dao: ScenarioDocuAggregationDAO,
                 current_version: str = CURRENT_FILE_FORMAT_VERSION) -> None:
        self._dao = dao
        self.current_version = current_version

    def load_version(self, build: BuildIdentifier) -> Optional[str]:
        return self._dao.load_version(build)

    def is_current(self, build: BuildIdentifier) -> bool:
        # Exact match only, newer stamps are as untrusted as older ones
        version = self.load_version(build)
        return version is not None and version == self.current_version

    def stamp(self, build: BuildIdentifier) -> None:
        self._dao.save_version(build, self.current_version)

    def import_status(self, build: BuildIdentifier, upstream_failed: bool) -> BuildImportStatus:
        return determine_import_status(self.load_version(build), upstream_failed, self.current_version)
