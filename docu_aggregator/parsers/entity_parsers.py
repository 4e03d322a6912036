"""
Parsers for branch, build, use case and scenario descriptions.

These entities share the simple ``name`` / ``description`` / ``status``
layout; steps have their own parser in step_parser.py.
"""

from docu_aggregator.domain.models import Branch, Build, Scenario, UseCase
from docu_aggregator.parsers.base_parser import BaseParser


class BranchParser(BaseParser):
    """Parser for ``branch.xml``."""

    root_tag = 'branch'

    def parse(self, xml_path: str) -> Branch:
        root = self._load_root(xml_path)
        return Branch(
            name=self._require_name(root, xml_path),
            description=self._get_text(root, 'description', ''),
        )


class BuildParser(BaseParser):
    """Parser for ``build.xml``."""

    root_tag = 'build'

    def parse(self, xml_path: str) -> Build:
        root = self._load_root(xml_path)
        return Build(
            name=self._require_name(root, xml_path),
            revision=self._get_text(root, 'revision', ''),
            date=self._get_text(root, 'date', ''),
            status=self._get_text(root, 'status'),
        )


class UseCaseParser(BaseParser):
    """
    Parser for ``usecase.xml``.

    A missing status is kept as None; the aggregator derives it from the
    scenarios of the use case.
    """

    root_tag = 'useCase'

    def parse(self, xml_path: str) -> UseCase:
        root = self._load_root(xml_path)
        return UseCase(
            name=self._require_name(root, xml_path),
            description=self._get_text(root, 'description', ''),
            status=self._get_text(root, 'status'),
            object_references=self._get_object_references(root),
        )


class ScenarioParser(BaseParser):
    """Parser for ``scenario.xml``."""

    root_tag = 'scenario'

    def parse(self, xml_path: str) -> Scenario:
        root = self._load_root(xml_path)
        return Scenario(
            name=self._require_name(root, xml_path),
            description=self._get_text(root, 'description', ''),
            status=self._get_text(root, 'status'),
            object_references=self._get_object_references(root),
        )
