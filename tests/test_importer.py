"""Tests for BuildImporter."""

import os

import pytest

from docu_aggregator.aggregation.scenario_docu_aggregator import ScenarioDocuAggregator
from docu_aggregator.domain.enums import BuildImportStatus
from docu_aggregator.domain.errors import ResourceNotFoundError
from docu_aggregator.domain.models import BuildIdentifier, BuildImportSummary
from docu_aggregator.importer import BuildImporter
from docu_aggregator.output.build_import_summaries_dao import BuildImportSummariesDAO
from tests.conftest import BRANCH, BUILD


class TestBuildImporter:

    @pytest.fixture(autouse=True)
    def _importer(self, sample_config, build_id):
        self.config = sample_config
        self.build = build_id
        self.importer = BuildImporter(sample_config)

    def test_update_build_summaries_finds_builds(self):
        summaries = self.importer.update_build_summaries()
        assert [s.identifier for s in summaries] == [self.build]
        assert summaries[0].status is BuildImportStatus.UNPROCESSED
        assert summaries[0].build_description.revision == 'r1'

    def test_import_build(self):
        summary = self.importer.import_build(self.build)
        assert summary.status is BuildImportStatus.SUCCESS
        assert summary.statistics.number_of_use_cases == 2
        assert summary.statistics.number_of_successful_scenarios == 4
        assert summary.statistics.number_of_failed_scenarios == 1

    def test_import_skips_current_build(self, monkeypatch):
        self.importer.import_build(self.build)

        def fail(self):
            raise AssertionError('should not recalculate')

        monkeypatch.setattr(ScenarioDocuAggregator, 'calculate_aggregated_data_for_build', fail)
        assert self.importer.import_build(self.build).status is BuildImportStatus.SUCCESS

    def test_force_recalculates(self, monkeypatch):
        self.importer.import_build(self.build)
        calls = []
        original = ScenarioDocuAggregator.calculate_aggregated_data_for_build

        def record(aggregator):
            calls.append(aggregator.build_identifier)
            original(aggregator)

        monkeypatch.setattr(ScenarioDocuAggregator, 'calculate_aggregated_data_for_build', record)
        self.importer.import_build(self.build, force=True)
        assert calls == [self.build]

    def test_failed_import_is_recorded(self, docs_writer):
        scenario_dir = docs_writer.scenario('Login', 'login_ok', 'success', steps=[{'page': 'Login Page'}])
        with open(os.path.join(scenario_dir, 'steps', '000.xml'), 'w') as f:
            f.write('<step>')

        summary = self.importer.import_build(self.build)
        assert summary.status is BuildImportStatus.FAILED
        assert 'failed' in summary.status_message
        assert self.importer.update_build_summaries()[0].status is BuildImportStatus.FAILED

    def test_import_missing_build_raises(self):
        with pytest.raises(ResourceNotFoundError):
            self.importer.import_build(BuildIdentifier(BRANCH, 'missing'))

    def test_import_all(self):
        imported = self.importer.import_all()
        assert [s.identifier for s in imported] == [self.build]
        assert self.importer.import_all() == []

    def test_import_all_reimports_outdated(self):
        ScenarioDocuAggregator(self.build, self.config, current_version='1.0.0').calculate_aggregated_data_for_build()
        assert self.importer.update_build_summaries()[0].status is BuildImportStatus.OUTDATED
        imported = self.importer.import_all()
        assert imported[0].status is BuildImportStatus.SUCCESS

    def test_remove_build(self):
        self.importer.import_build(self.build)
        summary = self.importer.remove_build(self.build)
        assert summary.status is BuildImportStatus.UNPROCESSED
        assert summary.statistics.number_of_use_cases == 0
        assert not os.path.exists(
            os.path.join(self.config.documentation_data_directory, BRANCH, BUILD, 'version.derived.json'))

    def test_summaries_persist_across_instances(self):
        self.importer.import_build(self.build)
        restored = BuildImporter(self.config).get_build_summary(self.build)
        assert restored.status is BuildImportStatus.SUCCESS
        assert restored.statistics.number_of_successful_scenarios == 4

    def _write_summary(self, status):
        dao = BuildImportSummariesDAO(self.config.documentation_data_directory)
        dao.save({self.build: BuildImportSummary(self.build, status=status)})

    def test_interrupted_import_is_retried(self):
        self._write_summary(BuildImportStatus.PROCESSING)
        importer = BuildImporter(self.config)
        assert importer.get_build_summary(self.build).status is BuildImportStatus.UNPROCESSED

        imported = importer.import_all()
        assert [s.identifier for s in imported] == [self.build]
        assert imported[0].status is BuildImportStatus.SUCCESS

    def test_queued_import_is_reset_on_disk(self):
        self._write_summary(BuildImportStatus.QUEUED_FOR_PROCESSING)
        BuildImporter(self.config)
        dao = BuildImportSummariesDAO(self.config.documentation_data_directory)
        assert dao.load()[self.build].status is BuildImportStatus.UNPROCESSED

    def test_interrupted_import_of_stamped_build_is_success(self):
        ScenarioDocuAggregator(self.build, self.config).calculate_aggregated_data_for_build()
        self._write_summary(BuildImportStatus.PROCESSING)
        summaries = BuildImporter(self.config).update_build_summaries()
        assert summaries[0].status is BuildImportStatus.SUCCESS

    def test_build_exists(self):
        assert self.importer.build_exists(self.build)
        assert not self.importer.build_exists(BuildIdentifier(BRANCH, 'missing'))
