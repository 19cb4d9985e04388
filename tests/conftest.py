"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest

from asset_minifier.core.models import MinifyOptions

JS_SOURCE = """\
function add(first, second) {
    // add two numbers
    var total = first + second;
    return total;
}
console.log(add(1, 2));
"""

CSS_SOURCE = """\
/* page styles */
body {
    color: red;
    margin: 0px;
}
"""

HTML_SOURCE = """\
<!DOCTYPE html>
<html>
  <head>
    <title>Test</title>
  </head>
  <body>
    <!-- greeting -->
    <p>Hello    world</p>
  </body>
</html>
"""

BROKEN_JS = "function( { "


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def asset_tree(temp_dir: Path):
    """Create a small site with one asset of each kind and a text file."""
    site = temp_dir / "site"
    site.mkdir()

    (site / "a.js").write_text(JS_SOURCE)
    (site / "b.css").write_text(CSS_SOURCE)
    (site / "c.txt").write_text("not an asset")

    pages = site / "pages"
    pages.mkdir()
    (pages / "index.html").write_text(HTML_SOURCE)

    yield site


@pytest.fixture
def nested_tree(temp_dir: Path):
    """Create a tree with vendor code and build tool configuration."""
    project = temp_dir / "project"
    (project / "src" / "lib").mkdir(parents=True)
    (project / "vendor").mkdir()

    (project / "src" / "app.js").write_text(JS_SOURCE)
    (project / "src" / "lib" / "util.js").write_text(JS_SOURCE)
    (project / "src" / "style.css").write_text(CSS_SOURCE)
    (project / "vendor" / "jquery.js").write_text(JS_SOURCE)
    (project / "webpack.config.js").write_text("module.exports = {};\n")

    yield project


@pytest.fixture
def make_options():
    """Factory for MinifyOptions rooted at a directory."""

    def _make(base_path: Path, **kwargs) -> MinifyOptions:
        return MinifyOptions(base_path=base_path, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo CLI logging setup so caplog sees package records."""
    logger = logging.getLogger("asset_minifier")
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
