"""JSON storage of aggregated documentation data.

Derived files are written next to the raw documentation of a build. Every
derived file ends in ``.derived.json`` and every derived directory in
``.derived``, so they can be removed without touching raw input.

Output structure per build:
    <branch>/<build>/
    ├── version.derived.json
    ├── usecases.derived.json
    ├── longObjectNames.derived.json
    ├── objects.derived/_types.json
    ├── objects.derived/{type}/_list.json
    ├── objects.derived/{type}/{name}.json
    ├── custom-tabs.derived/{tab_id}.json
    └── {usecase}/
        ├── scenarios.derived.json
        └── {scenario}/pagesteps.derived.json

Output is deterministic: no timestamps, and sets are written sorted, so
aggregating the same raw data twice yields identical files.
"""

import json
import os
import shutil
import tempfile
from typing import Any, Optional

from docu_aggregator.docu_reader import encode_dir_name
from docu_aggregator.domain.constants import (
    CUSTOM_TABS_DIR,
    DERIVED_DIR_SUFFIX,
    DERIVED_FILE_SUFFIX,
    LONG_OBJECT_NAMES_FILE,
    OBJECT_LIST_FILE,
    OBJECT_TYPES_FILE,
    OBJECTS_DIR,
    SCENARIO_PAGE_STEPS_FILE,
    USECASE_SCENARIOS_FILE,
    USECASES_FILE,
    VERSION_FILE,
)
from docu_aggregator.domain.errors import MarshalError
from docu_aggregator.domain.models import (
    BuildIdentifier,
    ObjectIndex,
    ObjectLocation,
    ObjectReference,
    PageSteps,
    Scenario,
    ScenarioPageSteps,
    ScenarioSummary,
    StepDescription,
    StepLink,
    StepNavigation,
    UseCase,
    UseCaseScenarios,
    UseCaseScenariosList,
)
from docu_aggregator.resolution.long_object_names_resolver import LongObjectNamesResolver


class ScenarioDocuAggregationDAO:
    """Reads and writes the derived files of builds.

    Args:
        root_dir: Documentation data directory.
        long_object_names_resolver: Resolver for object file names.
        pretty: Whether to pretty-print JSON (default True).
    """

    def __init__(
        self,
        root_dir: str,
        long_object_names_resolver: LongObjectNamesResolver,
        pretty: bool = True,
    ) -> None:
        self._root_dir = root_dir
        self._resolver = long_object_names_resolver
        self._indent = 2 if pretty else None

    # ── Version ──────────────────────────────────────────────────────────

    def load_version(self, build: BuildIdentifier) -> Optional[str]:
        """Version stamp of the build, or None if it was never aggregated."""
        path = os.path.join(self.build_dir(build), VERSION_FILE)
        if not os.path.isfile(path):
            return None
        data = self._read_json(path)
        version = data.get('version') if isinstance(data, dict) else None
        return version if isinstance(version, str) and version.strip() else None

    def save_version(self, build: BuildIdentifier, version: str) -> None:
        """Write the version stamp atomically."""
        path = os.path.join(self.build_dir(build), VERSION_FILE)
        self._write_json_atomic(path, {'version': version})

    # ── Use Cases and Scenarios ──────────────────────────────────────────

    def save_use_case_scenarios_list(self, build: BuildIdentifier, use_case_scenarios_list: UseCaseScenariosList) -> None:
        data = {
            'use_cases': [
                _use_case_scenarios_to_dict(ucs) for ucs in use_case_scenarios_list.use_case_scenarios
            ],
        }
        self._write_json(os.path.join(self.build_dir(build), USECASES_FILE), data)

    def save_use_case_scenarios(self, build: BuildIdentifier, use_case_scenarios: UseCaseScenarios) -> None:
        path = os.path.join(self.use_case_dir(build, use_case_scenarios.use_case.name), USECASE_SCENARIOS_FILE)
        self._write_json(path, _use_case_scenarios_to_dict(use_case_scenarios))

    def save_scenario_page_steps(self, build: BuildIdentifier, scenario_page_steps: ScenarioPageSteps) -> None:
        scenario_dir = os.path.join(
            self.use_case_dir(build, scenario_page_steps.use_case.name),
            encode_dir_name(scenario_page_steps.scenario.name),
        )
        data = {
            'use_case': _use_case_to_dict(scenario_page_steps.use_case),
            'scenario': _scenario_to_dict(scenario_page_steps.scenario),
            'total_number_of_steps': scenario_page_steps.total_number_of_steps_in_scenario,
            'pages_and_steps': [_page_steps_to_dict(ps) for ps in scenario_page_steps.pages_and_steps],
        }
        self._write_json(os.path.join(scenario_dir, SCENARIO_PAGE_STEPS_FILE), data)

    # ── Long Object Names ────────────────────────────────────────────────

    def save_long_object_names_index(self, build: BuildIdentifier, resolver: LongObjectNamesResolver) -> None:
        path = os.path.join(self.build_dir(build), LONG_OBJECT_NAMES_FILE)
        self._write_json(path, resolver.to_index())

    def load_long_object_names_index(self, build: BuildIdentifier) -> Optional[LongObjectNamesResolver]:
        path = os.path.join(self.build_dir(build), LONG_OBJECT_NAMES_FILE)
        if not os.path.isfile(path):
            return None
        return LongObjectNamesResolver.from_index(self._read_json(path))

    # ── Object Indexes ───────────────────────────────────────────────────

    def load_object_index(self, build: BuildIdentifier, reference: ObjectReference) -> Optional[ObjectIndex]:
        path = self._object_index_path(build, reference)
        if not os.path.isfile(path):
            return None
        data = self._read_json(path)
        try:
            return ObjectIndex(
                reference=ObjectReference(**data['object']),
                locations={ObjectLocation(**loc) for loc in data['locations']},
            )
        except (KeyError, TypeError) as e:
            raise MarshalError(f"Invalid object index {path}: {e}") from e

    def save_object_index(self, build: BuildIdentifier, object_index: ObjectIndex) -> None:
        data = {
            'object': _reference_to_dict(object_index.reference),
            'locations': [
                _location_to_dict(loc)
                for loc in sorted(object_index.locations, key=ObjectLocation.sort_key)
            ],
        }
        self._write_json(self._object_index_path(build, object_index.reference), data)

    def save_object_list(self, build: BuildIdentifier, object_type: str, entries: list[dict]) -> None:
        """Write the flat list of all objects of one type."""
        path = os.path.join(self._object_type_dir(build, object_type), OBJECT_LIST_FILE)
        self._write_json(path, {'type': object_type, 'objects': entries})

    def save_object_types(self, build: BuildIdentifier, entries: list[dict]) -> None:
        path = os.path.join(self.build_dir(build), OBJECTS_DIR, OBJECT_TYPES_FILE)
        self._write_json(path, {'types': entries})

    def save_custom_object_tab_tree(self, build: BuildIdentifier, tab_id: str, tree: dict) -> None:
        path = os.path.join(self.build_dir(build), CUSTOM_TABS_DIR, encode_dir_name(tab_id) + '.json')
        self._write_json(path, tree)

    def resolve_object_key(self, name: str) -> str:
        return self._resolver.resolve(name)

    def delete_object_data(self, build: BuildIdentifier) -> None:
        """Remove the object indexes and custom tab trees of a build."""
        for dir_name in (OBJECTS_DIR, CUSTOM_TABS_DIR):
            path = os.path.join(self.build_dir(build), dir_name)
            if os.path.isdir(path):
                shutil.rmtree(path)

    # ── Removal ──────────────────────────────────────────────────────────

    def delete_derived_files(self, build: BuildIdentifier) -> None:
        """
        Remove every derived file of a build, leaving raw files untouched.

        The version stamp goes first so that an interrupted removal never
        leaves a stamped build with incomplete data. Missing data is not an
        error.
        """
        build_dir = self.build_dir(build)
        if not os.path.isdir(build_dir):
            return

        try:
            version_path = os.path.join(build_dir, VERSION_FILE)
            if os.path.isfile(version_path):
                os.remove(version_path)

            for root, dirs, files in os.walk(build_dir):
                for d in [d for d in dirs if d.endswith(DERIVED_DIR_SUFFIX)]:
                    shutil.rmtree(os.path.join(root, d))
                    dirs.remove(d)
                for f in files:
                    if f.endswith(DERIVED_FILE_SUFFIX):
                        os.remove(os.path.join(root, f))
        except OSError as e:
            raise MarshalError(f"Could not delete derived files of build {build}: {e}") from e

    # ── Paths ────────────────────────────────────────────────────────────

    def build_dir(self, build: BuildIdentifier) -> str:
        return os.path.join(
            self._root_dir, encode_dir_name(build.branch_name), encode_dir_name(build.build_name),
        )

    def use_case_dir(self, build: BuildIdentifier, use_case_name: str) -> str:
        return os.path.join(self.build_dir(build), encode_dir_name(use_case_name))

    def _object_type_dir(self, build: BuildIdentifier, object_type: str) -> str:
        return os.path.join(self.build_dir(build), OBJECTS_DIR, self._resolver.resolve(object_type))

    def _object_index_path(self, build: BuildIdentifier, reference: ObjectReference) -> str:
        return os.path.join(
            self._object_type_dir(build, reference.type), self._resolver.resolve(reference.name) + '.json',
        )

    # ── JSON Files ───────────────────────────────────────────────────────

    def _write_json(self, path: str, data: Any) -> None:
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=self._indent, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            raise MarshalError(f"Could not marshal data into file {path}: {e}") from e

    def _write_json_atomic(self, path: str, data: Any) -> None:
        directory = os.path.dirname(path)
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.tmp-', suffix=DERIVED_FILE_SUFFIX)
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=self._indent, ensure_ascii=False)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise MarshalError(f"Could not marshal data into file {path}: {e}") from e

    @staticmethod
    def _read_json(path: str) -> Any:
        try:
            with open(path, encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise MarshalError(f"Could not unmarshal {path}: {e}") from e


# ── Serialization ────────────────────────────────────────────────────────

def _reference_to_dict(reference: ObjectReference) -> dict:
    return {'type': reference.type, 'name': reference.name}


def _location_to_dict(location: ObjectLocation) -> dict:
    return {
        'use_case': location.use_case,
        'scenario': location.scenario,
        'page': location.page,
        'step_index': location.step_index,
    }


def _use_case_to_dict(use_case: UseCase) -> dict:
    return {
        'name': use_case.name,
        'description': use_case.description,
        'status': use_case.status,
        'object_references': [_reference_to_dict(r) for r in use_case.object_references],
    }


def _scenario_to_dict(scenario: Scenario) -> dict:
    return {
        'name': scenario.name,
        'description': scenario.description,
        'status': scenario.status,
        'object_references': [_reference_to_dict(r) for r in scenario.object_references],
    }


def _scenario_summary_to_dict(summary: ScenarioSummary) -> dict:
    return {
        'scenario': _scenario_to_dict(summary.scenario),
        'number_of_steps': summary.number_of_steps,
    }


def _use_case_scenarios_to_dict(use_case_scenarios: UseCaseScenarios) -> dict:
    return {
        'use_case': _use_case_to_dict(use_case_scenarios.use_case),
        'scenarios': [_scenario_summary_to_dict(s) for s in use_case_scenarios.scenarios],
    }


def _step_link_to_dict(link: Optional[StepLink]) -> Optional[dict]:
    if link is None:
        return None
    return {
        'use_case': link.use_case,
        'scenario': link.scenario,
        'page_name': link.page_name,
        'page_occurrence': link.page_occurrence,
        'step_in_page_occurrence': link.step_in_page_occurrence,
        'step_index': link.step_index,
    }


def _navigation_to_dict(navigation: Optional[StepNavigation]) -> Optional[dict]:
    if navigation is None:
        return None
    return {
        'page_index': navigation.page_index,
        'previous_step': _step_link_to_dict(navigation.previous_step),
        'next_step': _step_link_to_dict(navigation.next_step),
        'previous_page': _step_link_to_dict(navigation.previous_page),
        'next_page': _step_link_to_dict(navigation.next_page),
        'page_variant_index': navigation.page_variant_index,
        'page_variants_count': navigation.page_variants_count,
        'page_variant_scenario_index': navigation.page_variant_scenario_index,
        'page_variant_scenarios_count': navigation.page_variant_scenarios_count,
        'previous_page_variant': _step_link_to_dict(navigation.previous_page_variant),
        'next_page_variant': _step_link_to_dict(navigation.next_page_variant),
        'previous_page_variant_scenario': _step_link_to_dict(navigation.previous_page_variant_scenario),
        'next_page_variant_scenario': _step_link_to_dict(navigation.next_page_variant_scenario),
    }


def _step_description_to_dict(step: StepDescription) -> dict:
    return {
        'index': step.index,
        'title': step.title,
        'status': step.status,
        'screenshot_file_name': step.screenshot_file_name,
        'navigation': _navigation_to_dict(step.navigation),
    }


def _page_steps_to_dict(page_steps: PageSteps) -> dict:
    return {
        'page': {'name': page_steps.page.name},
        'page_occurrence': page_steps.page_occurrence,
        'steps': [_step_description_to_dict(s) for s in page_steps.steps],
    }
