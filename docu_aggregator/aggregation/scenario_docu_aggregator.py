"""Aggregation of the raw documentation of one build.

The aggregator reads the raw documentation files of a build once and
writes the aggregated files with additional precalculated data (scenario
summaries, pages with step navigation, object indexes).

Adjust ``CURRENT_FILE_FORMAT_VERSION`` in domain/constants.py whenever the
format of the generated data is extended or changed.
"""

import logging
from typing import Optional

from docu_aggregator.aggregation.steps_and_pages_aggregator import StepsAndPagesAggregator
from docu_aggregator.aggregation.versioning import VersionController
from docu_aggregator.config import AggregatorConfig
from docu_aggregator.docu_reader import ScenarioDocuReader
from docu_aggregator.domain.constants import CURRENT_FILE_FORMAT_VERSION
from docu_aggregator.domain.enums import StatusEnum
from docu_aggregator.domain.errors import AggregationError, ResourceNotFoundError
from docu_aggregator.domain.models import (
    BuildIdentifier,
    BuildImportSummary,
    BuildLink,
    BuildStatistics,
    ReferencePath,
    Scenario,
    ScenarioPageSteps,
    ScenarioSummary,
    UseCase,
    UseCaseScenarios,
    UseCaseScenariosList,
)
from docu_aggregator.objects.object_repository import ObjectRepository
from docu_aggregator.output.aggregation_dao import ScenarioDocuAggregationDAO
from docu_aggregator.resolution.long_object_names_resolver import LongObjectNamesResolver
from docu_aggregator.resolution.page_name_sanitizer import sanitize_page_names

logger = logging.getLogger(__name__)


class ScenarioDocuAggregator:
    """Aggregates the documentation of one build.

    Every aggregation run starts from scratch with its own long object
    names resolver, object repository and step grouping, so independent
    builds can be aggregated by separate instances at the same time.
    Concurrent runs for the same build must be serialized by the caller.

    Args:
        build_identifier: Build to aggregate.
        config: Aggregator configuration.
        reader: Raw documentation reader, defaults to one on the configured
            documentation data directory.
        current_version: Format version to stamp and to check against.
    """

    def __init__(
        self,
        build_identifier: BuildIdentifier,
        config: AggregatorConfig,
        reader: Optional[ScenarioDocuReader] = None,
        current_version: str = CURRENT_FILE_FORMAT_VERSION,
    ) -> None:
        self.build_identifier = build_identifier
        self._config = config
        self._reader = reader or ScenarioDocuReader(config.documentation_data_directory)
        self._current_version = current_version
        self._build_statistics = BuildStatistics()
        self._reset_run_state()

    def _reset_run_state(self) -> None:
        self._long_object_names_resolver = LongObjectNamesResolver()
        self._dao = ScenarioDocuAggregationDAO(
            self._config.documentation_data_directory,
            self._long_object_names_resolver,
            pretty=self._config.pretty,
        )
        self._version_controller = VersionController(self._dao, self._current_version)
        self._steps_and_pages_aggregator = StepsAndPagesAggregator()
        self._object_repository = ObjectRepository(
            self.build_identifier, self._dao, self._config.custom_object_tabs,
        )

    # ── Public API ───────────────────────────────────────────────────────

    def is_aggregated_data_for_build_already_available_and_current_version(self) -> bool:
        return self._version_controller.is_current(self.build_identifier)

    def remove_aggregated_data_for_build(self) -> None:
        """Delete all derived files of the build; a no-op if there are none."""
        self._dao.delete_derived_files(self.build_identifier)
        self._object_repository.remove_any_existing_object_data()

    def calculate_aggregated_data_for_build(self) -> None:
        """
        Recalculate all aggregated data of the build.

        Scenarios whose raw steps are missing are skipped with a warning.
        Any other failure aborts the build; the version stamp is then not
        written and the build does not count as aggregated.

        Raises:
            AggregationError: If the aggregation failed.
        """
        logger.info("Calculating aggregated data for build %s", self.build_identifier)
        self._build_statistics = BuildStatistics()
        self._reset_run_state()
        try:
            self._calculate_aggregated_data()
        except AggregationError:
            raise
        except Exception as e:
            raise AggregationError(f"Aggregation of build {self.build_identifier} failed: {e}") from e

        logger.info(
            "Aggregated build %s: %d use cases, %d successful and %d failed scenarios",
            self.build_identifier,
            self._build_statistics.number_of_use_cases,
            self._build_statistics.number_of_successful_scenarios,
            self._build_statistics.number_of_failed_scenarios,
        )

    def update_build_summary(self, build_summary: BuildImportSummary, build_link: BuildLink) -> None:
        """Set description and import status of a build summary.

        The status combines the stored version stamp with the failure flag
        the summary already carries from the last import.
        """
        build_summary.build_description = build_link.build
        build_summary.status = self._version_controller.import_status(
            build_summary.identifier, build_summary.status.is_failed(),
        )

    def get_build_statistics(self) -> BuildStatistics:
        return self._build_statistics

    # ── Aggregation ──────────────────────────────────────────────────────

    def _calculate_aggregated_data(self) -> None:
        self.remove_aggregated_data_for_build()

        use_case_scenarios_list = self._calculate_use_case_scenarios_list()
        all_scenario_page_steps: list[ScenarioPageSteps] = []
        for use_case_scenarios in use_case_scenarios_list.use_case_scenarios:
            all_scenario_page_steps.extend(self._calculate_aggregated_data_for_use_case(use_case_scenarios))
            self._build_statistics.increment_use_case()

        self._steps_and_pages_aggregator.complete_aggregated_page_variant_data_in_step_navigations(
            all_scenario_page_steps,
        )
        for scenario_page_steps in all_scenario_page_steps:
            self._dao.save_scenario_page_steps(self.build_identifier, scenario_page_steps)

        self._dao.save_use_case_scenarios_list(self.build_identifier, use_case_scenarios_list)
        self._object_repository.calculate_and_save_object_lists()
        self._object_repository.save_custom_object_tab_trees()
        self._dao.save_long_object_names_index(self.build_identifier, self._long_object_names_resolver)

        # Written last: marks the build as completely aggregated
        self._version_controller.stamp(self.build_identifier)

    def _calculate_use_case_scenarios_list(self) -> UseCaseScenariosList:
        build = self.build_identifier
        result = UseCaseScenariosList()
        for use_case in self._reader.load_usecases(build.branch_name, build.build_name):
            scenarios = self._reader.load_scenarios(build.branch_name, build.build_name, use_case.name)
            if not use_case.status:
                use_case.status = self._derive_use_case_status(scenarios)
            result.use_case_scenarios.append(UseCaseScenarios(
                use_case=use_case,
                scenarios=[ScenarioSummary(scenario=s) for s in scenarios],
            ))
        return result

    @staticmethod
    def _derive_use_case_status(scenarios: list[Scenario]) -> str:
        if any(s.status == StatusEnum.FAILED.value for s in scenarios):
            return StatusEnum.FAILED.value
        return StatusEnum.SUCCESS.value

    def _calculate_aggregated_data_for_use_case(self, use_case_scenarios: UseCaseScenarios) -> list[ScenarioPageSteps]:
        use_case = use_case_scenarios.use_case
        logger.info("  Calculating aggregated data for use case %s", use_case.name)

        reference_path = self._object_repository.add_referenced_use_case_objects(use_case)
        results = []
        for summary in use_case_scenarios.scenarios:
            try:
                results.append(self._calculate_aggregated_data_for_scenario(reference_path, use_case, summary))
            except ResourceNotFoundError as e:
                logger.warning(
                    "Could not load scenario %s in use case %s, skipping it: %s",
                    summary.scenario.name, use_case.name, e,
                )
                continue
            self._add_scenario_statistics(summary.scenario)

        self._dao.save_use_case_scenarios(self.build_identifier, use_case_scenarios)
        self._object_repository.update_and_save_object_indexes_for_current_case()
        return results

    def _add_scenario_statistics(self, scenario: Scenario) -> None:
        if scenario.status == StatusEnum.SUCCESS.value:
            self._build_statistics.increment_successful_scenario()
        elif scenario.status == StatusEnum.FAILED.value:
            self._build_statistics.increment_failed_scenario()

    def _calculate_aggregated_data_for_scenario(
        self, reference_path: ReferencePath, use_case: UseCase, summary: ScenarioSummary,
    ) -> ScenarioPageSteps:
        scenario = summary.scenario
        build = self.build_identifier
        logger.info("    Calculating aggregated data for scenario %s", scenario.name)

        # Steps are loaded before any reference is recorded, so a skipped
        # scenario leaves no trace in the object index
        steps = self._reader.load_steps(build.branch_name, build.build_name, use_case.name, scenario.name)
        sanitize_page_names(steps, self._config.page_name_sanitizer)

        scenario_path = self._object_repository.add_referenced_scenario_objects(reference_path, scenario)
        scenario_page_steps = ScenarioPageSteps(
            use_case=use_case,
            scenario=scenario,
            pages_and_steps=self._steps_and_pages_aggregator.calculate_scenario_page_steps(
                use_case, scenario, steps, scenario_path, self._object_repository,
            ),
        )
        summary.number_of_steps = scenario_page_steps.total_number_of_steps_in_scenario
        return scenario_page_steps
