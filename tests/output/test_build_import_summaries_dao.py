"""Tests for persisting build import summaries."""

import pytest

from docu_aggregator.domain.enums import BuildImportStatus
from docu_aggregator.domain.errors import MarshalError
from docu_aggregator.domain.models import Build, BuildIdentifier, BuildImportSummary, BuildStatistics
from docu_aggregator.output.build_import_summaries_dao import BuildImportSummariesDAO


class TestBuildImportSummariesDAO:

    def test_load_without_file(self, tmp_path):
        assert BuildImportSummariesDAO(str(tmp_path)).load() == {}

    def test_roundtrip(self, tmp_path):
        dao = BuildImportSummariesDAO(str(tmp_path))
        identifier = BuildIdentifier('main', 'build-1')
        summary = BuildImportSummary(
            identifier,
            build_description=Build('build-1', revision='r1', date='2024-01-01'),
            status=BuildImportStatus.FAILED,
            status_message='boom',
            statistics=BuildStatistics(2, 3, 1),
        )
        dao.save({identifier: summary})
        assert dao.load() == {identifier: summary}

    def test_corrupt_file_raises(self, tmp_path):
        (tmp_path / 'build-import-summaries.derived.json').write_text('[{"branch_name": "main"}]')
        with pytest.raises(MarshalError):
            BuildImportSummariesDAO(str(tmp_path)).load()
