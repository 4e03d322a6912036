"""Shared test fixtures."""

import os
from xml.sax.saxutils import escape, quoteattr

import pytest

from docu_aggregator.config import AggregatorConfig, CustomObjectTab
from docu_aggregator.docu_reader import encode_dir_name
from docu_aggregator.domain.models import BuildIdentifier


BRANCH = 'main'
BUILD = 'build-1'
BUILD_ID = BuildIdentifier(BRANCH, BUILD)

LONG_QUERY = 'find all pages containing ' + 'x' * 120


# ── Sample XML Content ───────────────────────────────────────────────────

BRANCH_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<branch>
  <name>{name}</name>
  <description>{description}</description>
</branch>
"""

BUILD_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<build>
  <name>{name}</name>
  <revision>{revision}</revision>
  <date>{date}</date>
  <status>success</status>
</build>
"""

USECASE_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<useCase>
  <name>{name}</name>
  <description>{description}</description>
  {status}
  {references}
</useCase>
"""

SCENARIO_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<scenario>
  <name>{name}</name>
  <description>{description}</description>
  {status}
  {references}
</scenario>
"""

STEP_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<step>
  <stepDescription>
    <index>{index}</index>
    <title>{title}</title>
    <status>{status}</status>
    <screenshotFileName>{index:03d}.png</screenshotFileName>
  </stepDescription>
  {page}
  {references}
</step>
"""


def references_xml(references) -> str:
    if not references:
        return ''
    items = ''.join(
        f'<objectReference type={quoteattr(ref_type)} name={quoteattr(name)}/>'
        for ref_type, name in references
    )
    return f'<objectReferences>{items}</objectReferences>'


def _status_xml(status) -> str:
    return f'<status>{escape(status)}</status>' if status else ''


class DocsWriter:
    """Writes a raw documentation tree below ``root``."""

    def __init__(self, root: str):
        self.root = root

    def branch(self, name: str = BRANCH, description: str = '') -> str:
        path = os.path.join(self.root, encode_dir_name(name))
        self._write(path, 'branch.xml', BRANCH_XML.format(name=escape(name), description=escape(description)))
        return path

    def build(self, branch: str = BRANCH, name: str = BUILD, revision: str = 'r1', date: str = '2024-01-01') -> str:
        path = os.path.join(self.root, encode_dir_name(branch), encode_dir_name(name))
        self._write(path, 'build.xml', BUILD_XML.format(name=escape(name), revision=revision, date=date))
        return path

    def use_case(self, name: str, status=None, references=(), branch: str = BRANCH, build: str = BUILD) -> str:
        path = os.path.join(self.root, encode_dir_name(branch), encode_dir_name(build), encode_dir_name(name))
        content = USECASE_XML.format(
            name=escape(name), description=f'Use case {escape(name)}',
            status=_status_xml(status), references=references_xml(references),
        )
        self._write(path, 'usecase.xml', content)
        return path

    def scenario(self, use_case: str, name: str, status='success', references=(), steps=None,
                 branch: str = BRANCH, build: str = BUILD) -> str:
        """Write a scenario; ``steps`` is a list of dicts with page/title/references/page_references.

        Without ``steps`` no steps directory is created.
        """
        path = os.path.join(
            self.root, encode_dir_name(branch), encode_dir_name(build),
            encode_dir_name(use_case), encode_dir_name(name),
        )
        content = SCENARIO_XML.format(
            name=escape(name), description='', status=_status_xml(status),
            references=references_xml(references),
        )
        self._write(path, 'scenario.xml', content)
        if steps is not None:
            os.makedirs(os.path.join(path, 'steps'), exist_ok=True)
            for index, step in enumerate(steps):
                self.step(path, index, **step)
        return path

    def step(self, scenario_dir: str, index: int, page=None, title: str = '', status: str = 'success',
             references=(), page_references=()) -> str:
        page_xml = ''
        if page is not None:
            page_xml = f'<page><name>{escape(page)}</name>{references_xml(page_references)}</page>'
        content = STEP_XML.format(
            index=index, title=escape(title or f'Step {index}'), status=status,
            page=page_xml, references=references_xml(references),
        )
        steps_dir = os.path.join(scenario_dir, 'steps')
        self._write(steps_dir, f'{index:03d}.xml', content)
        return os.path.join(steps_dir, f'{index:03d}.xml')

    @staticmethod
    def _write(directory: str, filename: str, content: str) -> None:
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, filename), 'w', encoding='utf-8') as f:
            f.write(content)


def write_sample_build(writer: DocsWriter) -> None:
    """Two use cases, five scenarios, all with steps.

    Page sequence of "Find Page"/"a_success" is Home, Home, Search Results,
    Home; the second step's raw page name carries extra whitespace.
    """
    writer.branch(description='Main branch')
    writer.build()

    writer.use_case('Find Page', references=[('customer', 'Alice')])
    writer.scenario('Find Page', 'a_success', 'success', references=[('order', 'Order #123/4')], steps=[
        {'page': 'Home', 'references': [('product', 'Book')]},
        {'page': '  Home ', 'title': 'Search'},
        {'page': 'Search Results', 'page_references': [('searchQuery', LONG_QUERY)]},
        {'page': 'Home', 'references': [('product', 'Book')]},
    ])
    writer.scenario('Find Page', 'b_failed', 'failed', steps=[
        {'page': 'Home'},
        {'page': 'Error', 'status': 'failed'},
    ])
    writer.scenario('Find Page', 'c_success', 'success', steps=[
        {'page': 'Home'},
    ])

    writer.use_case('Login')
    writer.scenario('Login', 'login_ok', 'success', steps=[
        {'page': 'Login Page', 'references': [('customer', 'Alice')]},
        {'page': 'Home'},
    ])
    writer.scenario('Login', 'login_twice', 'success', steps=[
        {'page': 'Login Page'},
    ])


@pytest.fixture
def docs_root(tmp_path):
    root = tmp_path / 'docs'
    root.mkdir()
    return str(root)


@pytest.fixture
def docs_writer(docs_root):
    return DocsWriter(docs_root)


@pytest.fixture
def sample_docs(docs_writer):
    """Documentation directory holding the sample build ``main/build-1``."""
    write_sample_build(docs_writer)
    return docs_writer.root


@pytest.fixture
def sample_config(sample_docs):
    return AggregatorConfig(
        documentation_data_directory=sample_docs,
        custom_object_tabs=[
            CustomObjectTab(tab_id='customers', title='Customers', searched_object_types=('customer', 'product')),
        ],
    )


@pytest.fixture
def build_id():
    return BUILD_ID


def read_file_tree(root: str) -> dict:
    """Map of relative path to bytes for every file below ``root``."""
    contents = {}
    for dirpath, _, filenames in os.walk(root):
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            with open(path, 'rb') as f:
                contents[os.path.relpath(path, root)] = f.read()
    return contents


@pytest.fixture
def tmp_xml(tmp_path):
    """Write XML content to a temp file and return its path."""
    def _write(content: str, filename: str = "test.xml") -> str:
        path = tmp_path / filename
        path.write_text(content, encoding='utf-8')
        return str(path)
    return _write
