"""Common literal values used across tutorial_pages.

These constants keep artifact filenames and content defaults centralized so
the pipeline, the deployment step, and tests can import the same values
without drifting. Intended for internal use within the tutorial_pages
package.

Examples
--------
>>> from tutorial_pages import _constants
>>> _constants.HOMEPAGE_ARTIFACT_TEMPLATE.format(slug="kotlin")
'kotlin_home.json'
>>> _constants.MANIFEST_FILENAME in _constants.RESERVED_ARTIFACTS
True
"""

SUBJECT_ARTIFACT_TEMPLATE = "{slug}.json"
HOMEPAGE_ARTIFACT_TEMPLATE = "{slug}_home.json"
MANIFEST_FILENAME = "manifest.json"
HASHES_FILENAME = "file-hashes.json"
RESERVED_ARTIFACTS = frozenset({MANIFEST_FILENAME, HASHES_FILENAME})

SITEMAP_FILENAME = "sitemap.xml"
ROBOTS_FILENAME = "robots.txt"
DEPLOYMENT_INFO_FILENAME = "deployment-info.json"

SPREADSHEET_SUFFIXES = (".xlsx", ".xls")
HOMEPAGE_TYPE = "homepage"
SUBJECT_TYPE = "subject"
DEFAULT_SECTION = "General"
DEFAULT_ITEM_TYPE = 1
SHORT_DESC_LIMIT = 155
WORDS_PER_MINUTE = 200
MAX_WORKERS = 8
