"""Tests for version stamps and import status precedence."""

import pytest

from docu_aggregator.aggregation.versioning import VersionController, determine_import_status
from docu_aggregator.domain.constants import CURRENT_FILE_FORMAT_VERSION
from docu_aggregator.domain.enums import BuildImportStatus
from docu_aggregator.output.aggregation_dao import ScenarioDocuAggregationDAO
from docu_aggregator.resolution.long_object_names_resolver import LongObjectNamesResolver


class TestDetermineImportStatus:

    @pytest.mark.parametrize('version, failed, expected', [
        (None, False, BuildImportStatus.UNPROCESSED),
        ('', False, BuildImportStatus.UNPROCESSED),
        ('   ', False, BuildImportStatus.UNPROCESSED),
        (CURRENT_FILE_FORMAT_VERSION, False, BuildImportStatus.SUCCESS),
        ('1.0.0', False, BuildImportStatus.OUTDATED),
        ('99.0.0', False, BuildImportStatus.OUTDATED),
        (None, True, BuildImportStatus.FAILED),
        (CURRENT_FILE_FORMAT_VERSION, True, BuildImportStatus.FAILED),
        ('1.0.0', True, BuildImportStatus.FAILED),
    ])
    def test_precedence(self, version, failed, expected):
        assert determine_import_status(version, failed) is expected

    def test_custom_current_version(self):
        assert determine_import_status('3.0.0', False, current_version='3.0.0') is BuildImportStatus.SUCCESS


class TestVersionController:

    @pytest.fixture(autouse=True)
    def _controller(self, tmp_path, build_id):
        self.build = build_id
        self.dao = ScenarioDocuAggregationDAO(str(tmp_path), LongObjectNamesResolver())
        self.controller = VersionController(self.dao)

    def test_not_current_without_stamp(self):
        assert self.controller.load_version(self.build) is None
        assert not self.controller.is_current(self.build)

    def test_current_after_stamp(self):
        self.controller.stamp(self.build)
        assert self.controller.load_version(self.build) == CURRENT_FILE_FORMAT_VERSION
        assert self.controller.is_current(self.build)
        assert self.controller.import_status(self.build, False) is BuildImportStatus.SUCCESS

    def test_other_version_is_not_current(self):
        self.dao.save_version(self.build, '1.0.0')
        assert not self.controller.is_current(self.build)
        assert self.controller.import_status(self.build, False) is BuildImportStatus.OUTDATED
