"""Common literal values used across darkdocs.

These constants keep filenames, suffixes, and markup class names centralized
so templates, generators, filters, and tests can import the same values
without drifting. Intended for internal use within the darkdocs package.

Examples
--------
>>> from darkdocs import _constants
>>> _constants.PAGE_SUFFIX
'.page'
>>> _constants.BROKEN_LINK_CLASS
'broken-link'
"""

PAGE_SUFFIX = ".page"
HTML_SUFFIX = ".html"
NAMESPACE_SEPARATOR = "::"
BROKEN_LINK_CLASS = "broken-link"
INDEX_FILENAME = "index.html"
MANIFEST_FILENAME = "index.json"
STATIC_ASSETS = ("darkdocs.css", "js", "images")
DEFAULT_PYGMENTS_STYLE = "default"
DEFAULT_EXAMPLE_LANGUAGE = "python"
