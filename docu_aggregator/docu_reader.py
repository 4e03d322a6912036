"""Reader for raw scenario documentation directories."""
import os
from typing import List
from urllib.parse import quote, unquote

from docu_aggregator.domain.constants import (
    BRANCH_FILE,
    BUILD_FILE,
    SCENARIO_FILE,
    STEP_FILE_SUFFIX,
    STEPS_DIR,
    USECASE_FILE,
)
from docu_aggregator.domain.errors import ResourceNotFoundError
from docu_aggregator.domain.models import Branch, Build, BuildLink, Scenario, Step, UseCase
from docu_aggregator.parsers import (
    BranchParser,
    BuildParser,
    ScenarioParser,
    StepParser,
    UseCaseParser,
)


def encode_dir_name(name: str) -> str:
    """Directory name of an entity: its URL-quoted name."""
    return quote(name, safe='')


def _step_file_sort_key(file_name: str) -> tuple:
    # Numbered step files by number, anything else after them by name
    stem = file_name[:-len(STEP_FILE_SUFFIX)]
    if stem.isdigit():
        return (0, int(stem), file_name)
    return (1, 0, file_name)


class ScenarioDocuReader:
    """Reads raw documentation entities of branches and builds.

    Layout below ``root_dir``:
        <branch>/branch.xml
        <branch>/<build>/build.xml
        <branch>/<build>/<usecase>/usecase.xml
        <branch>/<build>/<usecase>/<scenario>/scenario.xml
        <branch>/<build>/<usecase>/<scenario>/steps/NNN.xml

    Lists are ordered by directory name; steps by the number in their
    file name.
    """

    def __init__(self, root_dir: str):
        self.root_dir = root_dir
        self._branch_parser = BranchParser()
        self._build_parser = BuildParser()
        self._use_case_parser = UseCaseParser()
        self._scenario_parser = ScenarioParser()
        self._step_parser = StepParser()

    def load_branches(self) -> List[Branch]:
        """Load all branches found in the documentation directory."""
        return [
            self._branch_parser.parse(os.path.join(self.root_dir, d, BRANCH_FILE))
            for d in self._list_entity_dirs(self.root_dir, BRANCH_FILE)
        ]

    def load_builds(self, branch_name: str) -> List[BuildLink]:
        """Load all builds of a branch, together with their folder names."""
        branch_dir = self.branch_dir(branch_name)
        return [
            BuildLink(
                build=self._build_parser.parse(os.path.join(branch_dir, d, BUILD_FILE)),
                folder_name=unquote(d),
            )
            for d in self._list_entity_dirs(branch_dir, BUILD_FILE)
        ]

    def load_build(self, branch_name: str, build_name: str) -> Build:
        return self._build_parser.parse(os.path.join(self.build_dir(branch_name, build_name), BUILD_FILE))

    def load_usecases(self, branch_name: str, build_name: str) -> List[UseCase]:
        build_dir = self.build_dir(branch_name, build_name)
        return [
            self._use_case_parser.parse(os.path.join(build_dir, d, USECASE_FILE))
            for d in self._list_entity_dirs(build_dir, USECASE_FILE)
        ]

    def load_scenarios(self, branch_name: str, build_name: str, use_case_name: str) -> List[Scenario]:
        use_case_dir = self.use_case_dir(branch_name, build_name, use_case_name)
        return [
            self._scenario_parser.parse(os.path.join(use_case_dir, d, SCENARIO_FILE))
            for d in self._list_entity_dirs(use_case_dir, SCENARIO_FILE)
        ]

    def load_steps(
        self, branch_name: str, build_name: str, use_case_name: str, scenario_name: str,
    ) -> List[Step]:
        """Load the steps of a scenario in file name order.

        Raises:
            ResourceNotFoundError: If the scenario has no steps directory.
        """
        steps_dir = os.path.join(
            self.scenario_dir(branch_name, build_name, use_case_name, scenario_name), STEPS_DIR,
        )
        if not os.path.isdir(steps_dir):
            raise ResourceNotFoundError(steps_dir)

        step_files = sorted(
            (f for f in os.listdir(steps_dir)
             if f.endswith(STEP_FILE_SUFFIX) and os.path.isfile(os.path.join(steps_dir, f))),
            key=_step_file_sort_key,
        )
        return [self._step_parser.parse(os.path.join(steps_dir, f)) for f in step_files]

    # ── Directory Layout ─────────────────────────────────────────────────

    def branch_dir(self, branch_name: str) -> str:
        return os.path.join(self.root_dir, encode_dir_name(branch_name))

    def build_dir(self, branch_name: str, build_name: str) -> str:
        return os.path.join(self.branch_dir(branch_name), encode_dir_name(build_name))

    def use_case_dir(self, branch_name: str, build_name: str, use_case_name: str) -> str:
        return os.path.join(self.build_dir(branch_name, build_name), encode_dir_name(use_case_name))

    def scenario_dir(
        self, branch_name: str, build_name: str, use_case_name: str, scenario_name: str,
    ) -> str:
        return os.path.join(
            self.use_case_dir(branch_name, build_name, use_case_name), encode_dir_name(scenario_name),
        )

    @staticmethod
    def _list_entity_dirs(parent_dir: str, entity_file: str) -> List[str]:
        """Sorted subdirectories of ``parent_dir`` that contain ``entity_file``."""
        if not os.path.isdir(parent_dir):
            raise ResourceNotFoundError(parent_dir)
        return sorted(
            d for d in os.listdir(parent_dir)
            if os.path.isfile(os.path.join(parent_dir, d, entity_file))
        )
