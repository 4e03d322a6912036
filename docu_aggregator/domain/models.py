"""Shared data models used across reader, aggregation and output modules."""

from __future__ import annotations

from dataclasses import dataclass, field

from docu_aggregator.domain.constants import (
    PAGE_TYPE,
    SCENARIO_TYPE,
    STEP_TYPE,
    USECASE_TYPE,
)
from docu_aggregator.domain.enums import BuildImportStatus


# ── Builds ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BuildIdentifier:
    """Identifies one build of one branch."""

    branch_name: str
    build_name: str

    def __str__(self) -> str:
        return f"{self.branch_name}/{self.build_name}"


@dataclass
class Branch:
    name: str
    description: str = ''


@dataclass
class Build:
    name: str
    revision: str = ''
    date: str = ''
    status: str | None = None


@dataclass
class BuildLink:
    """A build as found in the documentation directory of its branch."""

    build: Build
    folder_name: str


@dataclass
class BuildStatistics:
    """Counters collected during one aggregation run."""

    number_of_use_cases: int = 0
    number_of_successful_scenarios: int = 0
    number_of_failed_scenarios: int = 0

    def increment_use_case(self) -> None:
        self.number_of_use_cases += 1

    def increment_successful_scenario(self) -> None:
        self.number_of_successful_scenarios += 1

    def increment_failed_scenario(self) -> None:
        self.number_of_failed_scenarios += 1


@dataclass
class BuildImportSummary:
    """Import state of one build, including statistics of the last import."""

    identifier: BuildIdentifier
    build_description: Build | None = None
    status: BuildImportStatus = BuildImportStatus.UNPROCESSED
    status_message: str | None = None
    statistics: BuildStatistics = field(default_factory=BuildStatistics)


# ── Raw Documentation Entities ───────────────────────────────────────────

@dataclass(frozen=True)
class ObjectReference:
    """A typed, named pointer to a business object."""

    type: str
    name: str


@dataclass
class UseCase:
    name: str
    description: str = ''
    status: str | None = None
    object_references: list[ObjectReference] = field(default_factory=list)


@dataclass
class Scenario:
    name: str
    description: str = ''
    status: str | None = None
    object_references: list[ObjectReference] = field(default_factory=list)


@dataclass
class Step:
    """One raw step of a scenario.

    ``page_name`` is the raw page identifier until the page names of the
    scenario get sanitized, and the normalized identifier afterwards.
    """

    index: int
    title: str = ''
    status: str | None = None
    page_name: str | None = None
    screenshot_file_name: str | None = None
    object_references: list[ObjectReference] = field(default_factory=list)
    page_object_references: list[ObjectReference] = field(default_factory=list)


# ── Reference Paths ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContextReference:
    """Position of the traversal in a reference path.

    ``type`` is one of the context types (use case, scenario, page, step).
    """

    type: str
    name: str


@dataclass(frozen=True)
class ObjectLocation:
    """Where in the documentation an object is referenced."""

    use_case: str
    scenario: str | None = None
    page: str | None = None
    step_index: int | None = None

    def sort_key(self) -> tuple:
        return (
            self.use_case,
            self.scenario or '',
            -1 if self.step_index is None else self.step_index,
            self.page or '',
        )


@dataclass(frozen=True)
class ReferencePath:
    """Ordered references visible at one point of the traversal.

    Paths are values: ``extend`` returns a new path and leaves the parent
    untouched, so sibling scenarios or steps never see each other's
    references.
    """

    references: tuple[ObjectReference | ContextReference, ...] = ()

    def extend(self, *references: ObjectReference | ContextReference) -> ReferencePath:
        return ReferencePath(self.references + tuple(references))

    def filtered(self, types: set[str] | frozenset[str]) -> tuple[ObjectReference, ...]:
        """Return the business references of the given types, in path order."""
        return tuple(ref for ref in self.business_objects() if ref.type in types)

    def business_objects(self) -> tuple[ObjectReference, ...]:
        return tuple(ref for ref in self.references if isinstance(ref, ObjectReference))

    def location(self) -> ObjectLocation:
        """Derive the location from the innermost context references.

        Business references never count as context, whatever their type.
        """
        context: dict[str, str] = {}
        for ref in self.references:
            if isinstance(ref, ContextReference):
                context[ref.type] = ref.name
        if USECASE_TYPE not in context:
            raise ValueError("Reference path has no use case context")
        step = context.get(STEP_TYPE)
        return ObjectLocation(
            use_case=context[USECASE_TYPE],
            scenario=context.get(SCENARIO_TYPE),
            page=context.get(PAGE_TYPE),
            step_index=int(step) if step is not None else None,
        )

    def __len__(self) -> int:
        return len(self.references)

    def __iter__(self):
        return iter(self.references)


@dataclass
class ObjectIndex:
    """All locations referencing one object, within one build."""

    reference: ObjectReference
    locations: set[ObjectLocation] = field(default_factory=set)


# ── Aggregated Pages and Steps ───────────────────────────────────────────

@dataclass(frozen=True)
class StepLink:
    """Addresses one step of one scenario within a build."""

    use_case: str
    scenario: str
    page_name: str | None
    page_occurrence: int
    step_in_page_occurrence: int
    step_index: int


@dataclass
class StepNavigation:
    """Navigation data of a step.

    The in-scenario links are known after grouping a scenario; the page
    variant fields are filled in once all scenarios of the build are
    grouped.
    """

    step_link: StepLink
    page_index: int
    previous_step: StepLink | None = None
    next_step: StepLink | None = None
    previous_page: StepLink | None = None
    next_page: StepLink | None = None
    page_variant_index: int = 0
    page_variants_count: int = 0
    page_variant_scenario_index: int = 0
    page_variant_scenarios_count: int = 0
    previous_page_variant: StepLink | None = None
    next_page_variant: StepLink | None = None
    previous_page_variant_scenario: StepLink | None = None
    next_page_variant_scenario: StepLink | None = None


@dataclass
class StepDescription:
    index: int
    title: str = ''
    status: str | None = None
    screenshot_file_name: str | None = None
    navigation: StepNavigation | None = None


@dataclass
class Page:
    name: str | None


@dataclass
class PageSteps:
    """A contiguous run of steps on the same page."""

    page: Page
    page_occurrence: int = 0
    steps: list[StepDescription] = field(default_factory=list)


@dataclass
class ScenarioPageSteps:
    use_case: UseCase
    scenario: Scenario
    pages_and_steps: list[PageSteps] = field(default_factory=list)

    @property
    def total_number_of_steps_in_scenario(self) -> int:
        return sum(len(page_steps.steps) for page_steps in self.pages_and_steps)


# ── Use Case Aggregates ──────────────────────────────────────────────────

@dataclass
class ScenarioSummary:
    scenario: Scenario
    number_of_steps: int = 0


@dataclass
class UseCaseScenarios:
    use_case: UseCase
    scenarios: list[ScenarioSummary] = field(default_factory=list)


@dataclass
class UseCaseScenariosList:
    use_case_scenarios: list[UseCaseScenarios] = field(default_factory=list)
