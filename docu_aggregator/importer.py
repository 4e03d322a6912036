"""Import of documentation builds.

Keeps the import summaries of all builds found in the documentation data
directory and triggers aggregation for builds that are new or outdated.
"""

import logging
import threading
from typing import Optional

from docu_aggregator.aggregation.scenario_docu_aggregator import ScenarioDocuAggregator
from docu_aggregator.config import AggregatorConfig
from docu_aggregator.docu_reader import ScenarioDocuReader
from docu_aggregator.domain.enums import BuildImportStatus
from docu_aggregator.domain.errors import AggregationError, ResourceNotFoundError
from docu_aggregator.domain.models import BuildIdentifier, BuildImportSummary, BuildStatistics
from docu_aggregator.output.build_import_summaries_dao import BuildImportSummariesDAO

logger = logging.getLogger(__name__)

_IN_PROGRESS = {BuildImportStatus.QUEUED_FOR_PROCESSING, BuildImportStatus.PROCESSING}
_NEEDS_IMPORT = {BuildImportStatus.UNPROCESSED, BuildImportStatus.OUTDATED}


class BuildImporter:
    """Imports builds and tracks their import summaries.

    Imports of the same build are serialized with a per-build lock;
    different builds may be imported concurrently.

    Args:
        config: Aggregator configuration shared by all imports.
    """

    def __init__(self, config: AggregatorConfig) -> None:
        self._config = config
        self._reader = ScenarioDocuReader(config.documentation_data_directory)
        self._summaries_dao = BuildImportSummariesDAO(config.documentation_data_directory, pretty=config.pretty)
        self._summaries = self._summaries_dao.load()
        self._summaries_lock = threading.Lock()
        self._build_locks: dict[BuildIdentifier, threading.Lock] = {}
        self._build_locks_lock = threading.Lock()
        self._reset_interrupted_imports()

    def update_build_summaries(self) -> list[BuildImportSummary]:
        """Scan the documentation directory and refresh all build statuses."""
        found: dict[BuildIdentifier, BuildImportSummary] = {}
        for branch in self._reader.load_branches():
            for build_link in self._reader.load_builds(branch.name):
                identifier = BuildIdentifier(branch.name, build_link.folder_name)
                summary = self._summaries.get(identifier) or BuildImportSummary(identifier)
                if summary.status in _IN_PROGRESS:
                    summary.build_description = build_link.build
                else:
                    self._create_aggregator(identifier).update_build_summary(summary, build_link)
                found[identifier] = summary

        with self._summaries_lock:
            self._summaries = found
            self._summaries_dao.save(self._summaries)
        return self.get_build_summaries()

    def get_build_summaries(self) -> list[BuildImportSummary]:
        return sorted(
            self._summaries.values(),
            key=lambda s: (s.identifier.branch_name, s.identifier.build_name),
        )

    def get_build_summary(self, identifier: BuildIdentifier) -> Optional[BuildImportSummary]:
        return self._summaries.get(identifier)

    def import_build(self, identifier: BuildIdentifier, force: bool = False) -> BuildImportSummary:
        """
        Aggregate one build unless its aggregated data is current.

        Args:
            identifier: Build to import.
            force: Aggregate even if the aggregated data is current.

        Returns:
            The updated import summary. A failed aggregation is recorded
            as FAILED with the error message rather than raised.

        Raises:
            ResourceNotFoundError: If the build does not exist.
        """
        with self._lock_for(identifier):
            build = self._reader.load_build(identifier.branch_name, identifier.build_name)
            summary = self._summaries.get(identifier) or BuildImportSummary(identifier)
            summary.build_description = build

            aggregator = self._create_aggregator(identifier)
            if (not force and not summary.status.is_failed()
                    and aggregator.is_aggregated_data_for_build_already_available_and_current_version()):
                logger.info("Aggregated data of build %s is current, skipping import", identifier)
                summary.status = BuildImportStatus.SUCCESS
                self._save_summary(summary)
                return summary

            summary.status = BuildImportStatus.PROCESSING
            summary.status_message = None
            self._save_summary(summary)

            try:
                aggregator.calculate_aggregated_data_for_build()
            except AggregationError as e:
                logger.exception("Import of build %s failed", identifier)
                summary.status = BuildImportStatus.FAILED
                summary.status_message = str(e)
                summary.statistics = BuildStatistics()
            else:
                summary.status = BuildImportStatus.SUCCESS
                summary.statistics = aggregator.get_build_statistics()

            self._save_summary(summary)
            return summary

    def import_all(self) -> list[BuildImportSummary]:
        """Import every build that is unprocessed or outdated."""
        imported = []
        for summary in self.update_build_summaries():
            if summary.status in _NEEDS_IMPORT:
                imported.append(self.import_build(summary.identifier))
        return imported

    def remove_build(self, identifier: BuildIdentifier) -> BuildImportSummary:
        """Delete the aggregated data of a build and mark it unprocessed."""
        with self._lock_for(identifier):
            self._create_aggregator(identifier).remove_aggregated_data_for_build()
            summary = self._summaries.get(identifier) or BuildImportSummary(identifier)
            summary.status = BuildImportStatus.UNPROCESSED
            summary.status_message = None
            summary.statistics = BuildStatistics()
            self._save_summary(summary)
            return summary

    def build_exists(self, identifier: BuildIdentifier) -> bool:
        try:
            self._reader.load_build(identifier.branch_name, identifier.build_name)
        except ResourceNotFoundError:
            return False
        return True

    def _reset_interrupted_imports(self) -> None:
        """Mark imports left queued or processing by an earlier process as unprocessed.

        No import runs in a fresh importer, so such a status is stale. The
        next scan re-evaluates it against the version stamp.
        """
        interrupted = [s for s in self._summaries.values() if s.status in _IN_PROGRESS]
        for summary in interrupted:
            logger.warning("Import of build %s was interrupted, marking it unprocessed", summary.identifier)
            summary.status = BuildImportStatus.UNPROCESSED
            summary.status_message = None
        if interrupted:
            self._summaries_dao.save(self._summaries)

    def _create_aggregator(self, identifier: BuildIdentifier) -> ScenarioDocuAggregator:
        return ScenarioDocuAggregator(identifier, self._config, reader=self._reader)

    def _lock_for(self, identifier: BuildIdentifier) -> threading.Lock:
        with self._build_locks_lock:
            lock = self._build_locks.get(identifier)
            if lock is None:
                lock = threading.Lock()
                self._build_locks[identifier] = lock
            return lock

    def _save_summary(self, summary: BuildImportSummary) -> None:
        with self._summaries_lock:
            self._summaries[summary.identifier] = summary
            self._summaries_dao.save(self._summaries)
