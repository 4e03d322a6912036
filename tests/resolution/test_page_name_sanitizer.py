"""Tests for page name normalization."""

from docu_aggregator.domain.models import Step
from docu_aggregator.resolution.page_name_sanitizer import sanitize_page_name, sanitize_page_names


class TestSanitizePageName:

    def test_strips_and_collapses_whitespace(self):
        assert sanitize_page_name('  Search \t Results \n') == 'Search Results'

    def test_replaces_path_separators(self):
        assert sanitize_page_name('admin/users\\edit') == 'admin_users_edit'

    def test_none_stays_none(self):
        assert sanitize_page_name(None) is None

    def test_clean_name_unchanged(self):
        assert sanitize_page_name('Home') == 'Home'


class TestSanitizePageNames:

    def test_updates_steps_in_place(self):
        steps = [Step(index=0, page_name=' Home '), Step(index=1, page_name=None)]
        sanitize_page_names(steps)
        assert [s.page_name for s in steps] == ['Home', None]

    def test_custom_sanitizer(self):
        steps = [Step(index=0, page_name='Home')]
        sanitize_page_names(steps, lambda name: name.upper() if name else name)
        assert steps[0].page_name == 'HOME'
