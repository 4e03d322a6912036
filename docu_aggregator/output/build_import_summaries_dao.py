"""Persistence of build import summaries.

Summaries of all builds live in one file at the root of the
documentation data directory.
"""

import json
import os
from typing import Any

from docu_aggregator.domain.constants import BUILD_IMPORT_SUMMARIES_FILE
from docu_aggregator.domain.enums import BuildImportStatus
from docu_aggregator.domain.errors import MarshalError
from docu_aggregator.domain.models import Build, BuildIdentifier, BuildImportSummary, BuildStatistics


class BuildImportSummariesDAO:
    """Reads and writes ``build-import-summaries.derived.json``."""

    def __init__(self, root_dir: str, pretty: bool = True) -> None:
        self._path = os.path.join(root_dir, BUILD_IMPORT_SUMMARIES_FILE)
        self._indent = 2 if pretty else None

    def load(self) -> dict[BuildIdentifier, BuildImportSummary]:
        if not os.path.isfile(self._path):
            return {}
        try:
            with open(self._path, encoding='utf-8') as f:
                entries = json.load(f)
            summaries = [_summary_from_dict(entry) for entry in entries]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise MarshalError(f"Could not unmarshal {self._path}: {e}") from e
        return {s.identifier: s for s in summaries}

    def save(self, summaries: dict[BuildIdentifier, BuildImportSummary]) -> None:
        ordered = sorted(summaries.values(), key=lambda s: (s.identifier.branch_name, s.identifier.build_name))
        try:
            os.makedirs(os.path.dirname(self._path), exist_ok=True)
            with open(self._path, 'w', encoding='utf-8') as f:
                json.dump([_summary_to_dict(s) for s in ordered], f, indent=self._indent, ensure_ascii=False)
        except OSError as e:
            raise MarshalError(f"Could not marshal build import summaries into {self._path}: {e}") from e


def _summary_to_dict(summary: BuildImportSummary) -> dict[str, Any]:
    build = summary.build_description
    return {
        'branch_name': summary.identifier.branch_name,
        'build_name': summary.identifier.build_name,
        'build': None if build is None else {
            'name': build.name, 'revision': build.revision, 'date': build.date, 'status': build.status,
        },
        'status': summary.status.value,
        'status_message': summary.status_message,
        'statistics': {
            'number_of_use_cases': summary.statistics.number_of_use_cases,
            'number_of_successful_scenarios': summary.statistics.number_of_successful_scenarios,
            'number_of_failed_scenarios': summary.statistics.number_of_failed_scenarios,
        },
    }


def _summary_from_dict(data: dict[str, Any]) -> BuildImportSummary:
    build = data.get('build')
    return BuildImportSummary(
        identifier=BuildIdentifier(data['branch_name'], data['build_name']),
        build_description=Build(**build) if build else None,
        status=BuildImportStatus(data['status']),
        status_message=data.get('status_message'),
        statistics=BuildStatistics(**data.get('statistics', {})),
    )
