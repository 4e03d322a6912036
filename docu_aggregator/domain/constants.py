"""Shared constants for file layout, versioning and reference paths.

Centralizes naming that is shared between the raw reader, the aggregation
DAO and the object repository.
"""

# ── Aggregation Format ───────────────────────────────────────────────────

# Bump whenever the format of the generated files changes; builds stamped
# with any other value are recalculated before their data is trusted.
CURRENT_FILE_FORMAT_VERSION = '2.0.0'

# ── Raw Documentation Files ─────────────────────────────────────────────

BRANCH_FILE = 'branch.xml'
BUILD_FILE = 'build.xml'
USECASE_FILE = 'usecase.xml'
SCENARIO_FILE = 'scenario.xml'
STEPS_DIR = 'steps'
STEP_FILE_SUFFIX = '.xml'

# ── Derived Files ────────────────────────────────────────────────────────

DERIVED_FILE_SUFFIX = '.derived.json'
DERIVED_DIR_SUFFIX = '.derived'

VERSION_FILE = 'version' + DERIVED_FILE_SUFFIX
USECASES_FILE = 'usecases' + DERIVED_FILE_SUFFIX
USECASE_SCENARIOS_FILE = 'scenarios' + DERIVED_FILE_SUFFIX
SCENARIO_PAGE_STEPS_FILE = 'pagesteps' + DERIVED_FILE_SUFFIX
LONG_OBJECT_NAMES_FILE = 'longObjectNames' + DERIVED_FILE_SUFFIX

OBJECTS_DIR = 'objects' + DERIVED_DIR_SUFFIX
OBJECT_TYPES_FILE = '_types.json'
OBJECT_LIST_FILE = '_list.json'
CUSTOM_TABS_DIR = 'custom-tabs' + DERIVED_DIR_SUFFIX

BUILD_IMPORT_SUMMARIES_FILE = 'build-import-summaries' + DERIVED_FILE_SUFFIX

# ── Reference Path Context Types ────────────────────────────────────────

USECASE_TYPE = 'usecase'
SCENARIO_TYPE = 'scenario'
PAGE_TYPE = 'page'
STEP_TYPE = 'step'

# ── Long Object Names ───────────────────────────────────────────────────

MAX_SHORT_NAME_LENGTH = 80

# Keys never handed out for object names, they name index files
RESERVED_SHORT_NAMES: frozenset[str] = frozenset({'_list', '_types'})
