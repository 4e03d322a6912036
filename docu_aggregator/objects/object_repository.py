"""Index of the business objects referenced in a build.

While the aggregator walks use cases, scenarios and steps, every declared
object reference is recorded together with the location it was declared
at. The index is flushed to disk after each use case and merged with what
earlier use cases wrote, because object indexes span the whole build.
"""

import logging
from collections import defaultdict
from typing import Iterable, Sequence

from docu_aggregator.config import CustomObjectTab
from docu_aggregator.domain.constants import PAGE_TYPE, SCENARIO_TYPE, STEP_TYPE, USECASE_TYPE
from docu_aggregator.domain.models import (
    BuildIdentifier,
    ContextReference,
    ObjectIndex,
    ObjectLocation,
    ObjectReference,
    ReferencePath,
    Scenario,
    Step,
    StepLink,
    UseCase,
)
from docu_aggregator.objects.custom_object_tab_tree import CustomObjectTabTree
from docu_aggregator.output.aggregation_dao import ScenarioDocuAggregationDAO

logger = logging.getLogger(__name__)


def _reference_sort_key(reference: ObjectReference) -> tuple[str, str]:
    return reference.type, reference.name


class ObjectRepository:
    """Collects object references of one build.

    Stateful and single-threaded: one instance belongs to exactly one
    aggregation run of one build.

    Args:
        build: Build being aggregated.
        dao: Storage for the object index files.
        custom_object_tabs: Configured custom tabs to build trees for.
    """

    def __init__(
        self,
        build: BuildIdentifier,
        dao: ScenarioDocuAggregationDAO,
        custom_object_tabs: Sequence[CustomObjectTab] = (),
    ) -> None:
        self._build = build
        self._dao = dao
        self._pending: dict[ObjectReference, ObjectIndex] = {}
        self._objects_by_type: dict[str, dict[str, set[ObjectLocation]]] = defaultdict(lambda: defaultdict(set))
        self._tab_trees = [CustomObjectTabTree(tab) for tab in custom_object_tabs]

    def remove_any_existing_object_data(self) -> None:
        self._dao.delete_object_data(self._build)

    # ── Reference Recording ──────────────────────────────────────────────

    def add_referenced_use_case_objects(self, use_case: UseCase) -> ReferencePath:
        """Record the objects of a use case and return the use case's path."""
        path = ReferencePath().extend(ContextReference(USECASE_TYPE, use_case.name))
        return self._add_referenced_objects(path, use_case.object_references)

    def add_referenced_scenario_objects(self, parent_path: ReferencePath, scenario: Scenario) -> ReferencePath:
        """Record the objects of a scenario; ``parent_path`` is left unchanged."""
        path = parent_path.extend(ContextReference(SCENARIO_TYPE, scenario.name))
        return self._add_referenced_objects(path, scenario.object_references)

    def add_referenced_step_objects(
        self, parent_path: ReferencePath, step_link: StepLink, step: Step,
    ) -> ReferencePath:
        """Record the objects of a step and of its page."""
        context = [ContextReference(STEP_TYPE, str(step_link.step_index))]
        if step_link.page_name is not None:
            context.insert(0, ContextReference(PAGE_TYPE, step_link.page_name))
        path = parent_path.extend(*context)
        return self._add_referenced_objects(path, [*step.page_object_references, *step.object_references])

    def _add_referenced_objects(
        self, path: ReferencePath, references: Iterable[ObjectReference],
    ) -> ReferencePath:
        location = path.location()
        for reference in references:
            path = path.extend(reference)
            self._record(reference, location, path)
        return path

    def _record(self, reference: ObjectReference, location: ObjectLocation, path: ReferencePath) -> None:
        # Allocate file keys in traversal order, keeps keys stable between runs
        self._dao.resolve_object_key(reference.type)
        self._dao.resolve_object_key(reference.name)

        entry = self._pending.get(reference)
        if entry is None:
            entry = ObjectIndex(reference)
            self._pending[reference] = entry
        entry.locations.add(location)

        self._objects_by_type[reference.type][reference.name].add(location)
        for tree in self._tab_trees:
            tree.add_path(path)

    # ── Persistence ──────────────────────────────────────────────────────

    def update_and_save_object_indexes_for_current_case(self) -> None:
        """Flush entries recorded since the last flush, merged with stored ones."""
        for reference in sorted(self._pending, key=_reference_sort_key):
            entry = self._pending[reference]
            stored = self._dao.load_object_index(self._build, reference)
            if stored is not None:
                entry.locations |= stored.locations
            self._dao.save_object_index(self._build, entry)

        logger.debug("Saved %d object indexes for build %s", len(self._pending), self._build)
        self._pending.clear()

    def calculate_and_save_object_lists(self) -> None:
        """Write the per-type object lists and the object type overview."""
        if self._pending:
            self.update_and_save_object_indexes_for_current_case()

        type_entries = []
        for object_type in sorted(self._objects_by_type):
            objects = self._objects_by_type[object_type]
            entries = [
                {
                    'name': name,
                    'key': self._dao.resolve_object_key(name),
                    'reference_count': len(objects[name]),
                }
                for name in sorted(objects)
            ]
            self._dao.save_object_list(self._build, object_type, entries)
            type_entries.append({
                'type': object_type,
                'key': self._dao.resolve_object_key(object_type),
                'object_count': len(objects),
            })
        self._dao.save_object_types(self._build, type_entries)

    def save_custom_object_tab_trees(self) -> None:
        for tree in self._tab_trees:
            self._dao.save_custom_object_tab_tree(self._build, tree.tab.tab_id, tree.to_dict())
