"""Grouping of scenario steps into pages, and step navigation.

Aggregation of pages happens in two passes:

1. ``calculate_scenario_page_steps`` groups the steps of one scenario into
   pages and links each step to its neighbours within the scenario.
2. ``complete_aggregated_page_variant_data_in_step_navigations`` runs once
   all scenarios of the build are grouped and links steps showing the same
   page across scenarios ("page variants").
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Sequence

from docu_aggregator.domain.models import (
    Page,
    PageSteps,
    ReferencePath,
    Scenario,
    ScenarioPageSteps,
    Step,
    StepDescription,
    StepLink,
    StepNavigation,
    UseCase,
)
from docu_aggregator.objects.object_repository import ObjectRepository

logger = logging.getLogger(__name__)


class StepsAndPagesAggregator:
    """Groups steps into pages and computes step navigation."""

    def calculate_scenario_page_steps(
        self,
        use_case: UseCase,
        scenario: Scenario,
        steps: Sequence[Step],
        reference_path: ReferencePath,
        object_repository: ObjectRepository,
    ) -> list[PageSteps]:
        """
        Group the steps of a scenario into pages.

        Consecutive steps with equal page names form one group. A page
        visited again after another page starts a new group with the next
        ``page_occurrence``; revisits are never merged.

        Args:
            use_case: Use case of the scenario.
            scenario: Scenario the steps belong to.
            steps: Steps in scenario order, page names already sanitized.
            reference_path: References visible at scenario level.
            object_repository: Receives the object references of each step.

        Returns:
            Ordered page groups, each step carrying its in-scenario navigation.
        """
        page_steps_list: list[PageSteps] = []
        occurrences: dict[str | None, int] = defaultdict(int)
        current: PageSteps | None = None

        for step_index, step in enumerate(steps):
            if current is None or current.page.name != step.page_name:
                current = PageSteps(page=Page(step.page_name), page_occurrence=occurrences[step.page_name])
                occurrences[step.page_name] += 1
                page_steps_list.append(current)

            step_link = StepLink(
                use_case=use_case.name,
                scenario=scenario.name,
                page_name=step.page_name,
                page_occurrence=current.page_occurrence,
                step_in_page_occurrence=len(current.steps),
                step_index=step_index,
            )
            current.steps.append(StepDescription(
                index=step.index,
                title=step.title,
                status=step.status,
                screenshot_file_name=step.screenshot_file_name,
                navigation=StepNavigation(step_link=step_link, page_index=len(page_steps_list) - 1),
            ))
            object_repository.add_referenced_step_objects(reference_path, step_link, step)

        self._link_steps_within_scenario(page_steps_list)
        return page_steps_list

    @staticmethod
    def _link_steps_within_scenario(page_steps_list: list[PageSteps]) -> None:
        navigations = [step.navigation for page_steps in page_steps_list for step in page_steps.steps]
        first_of_page = [page_steps.steps[0].navigation.step_link for page_steps in page_steps_list]

        for i, navigation in enumerate(navigations):
            if i > 0:
                navigation.previous_step = navigations[i - 1].step_link
            if i < len(navigations) - 1:
                navigation.next_step = navigations[i + 1].step_link
            if navigation.page_index > 0:
                navigation.previous_page = first_of_page[navigation.page_index - 1]
            if navigation.page_index < len(first_of_page) - 1:
                navigation.next_page = first_of_page[navigation.page_index + 1]

    def complete_aggregated_page_variant_data_in_step_navigations(
        self, all_scenario_page_steps: Sequence[ScenarioPageSteps],
    ) -> None:
        """
        Link steps showing the same page across all scenarios of the build.

        Must run after every scenario has been grouped. Updates the step
        navigations of the given page steps in place. Steps without a page
        name have no variants.
        """
        variants: dict[str, list[StepNavigation]] = defaultdict(list)
        for scenario_page_steps in all_scenario_page_steps:
            for page_steps in scenario_page_steps.pages_and_steps:
                if page_steps.page.name is None:
                    continue
                for step in page_steps.steps:
                    variants[page_steps.page.name].append(step.navigation)

        for navigations in variants.values():
            self._complete_page_variants(navigations)

        logger.debug("Completed page variant navigation for %d pages", len(variants))

    @staticmethod
    def _complete_page_variants(navigations: list[StepNavigation]) -> None:
        # First step per scenario, in build order
        scenario_keys: list[tuple[str, str]] = []
        first_in_scenario: dict[tuple[str, str], StepLink] = {}
        for navigation in navigations:
            key = (navigation.step_link.use_case, navigation.step_link.scenario)
            if key not in first_in_scenario:
                first_in_scenario[key] = navigation.step_link
                scenario_keys.append(key)
        scenario_index = {key: i for i, key in enumerate(scenario_keys)}

        for i, navigation in enumerate(navigations):
            key = (navigation.step_link.use_case, navigation.step_link.scenario)
            index_of_scenario = scenario_index[key]

            navigation.page_variant_index = i
            navigation.page_variants_count = len(navigations)
            navigation.previous_page_variant = navigations[i - 1].step_link if i > 0 else None
            navigation.next_page_variant = navigations[i + 1].step_link if i < len(navigations) - 1 else None

            navigation.page_variant_scenario_index = index_of_scenario
            navigation.page_variant_scenarios_count = len(scenario_keys)
            navigation.previous_page_variant_scenario = (
                first_in_scenario[scenario_keys[index_of_scenario - 1]] if index_of_scenario > 0 else None
            )
            navigation.next_page_variant_scenario = (
                first_in_scenario[scenario_keys[index_of_scenario + 1]]
                if index_of_scenario < len(scenario_keys) - 1 else None
            )
