"""Shared test fixtures."""

from pathlib import Path

import pytest
from pageserve.config import Config, FilesConfig, ServerConfig

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create a serving root with a parent directory holding shared assets.

    Layout::

        tmp_path/
            styles/app.css
            shared.js
            site/            <- serving root
                index.html
                test.js
    """
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text("<h1>index</h1>")
    (root / "test.js").write_text("console.log('root test');")

    styles = tmp_path / "styles"
    styles.mkdir()
    (styles / "app.css").write_text("body { color: red; }")
    (tmp_path / "shared.js").write_text("console.log('shared');")
    return root


@pytest.fixture
def test_config(site_dir: Path) -> Config:
    """Create a test configuration rooted at site_dir with bundled TLS files."""
    return Config(
        server=ServerConfig(
            host="127.0.0.1",
            port=0,
            cert_file=DATA_DIR / "server.crt",
            key_file=DATA_DIR / "server.key",
        ),
        files=FilesConfig(
            root_dir=site_dir,
            default_document="index.html",
            allow_list=["test.js"],
            fallback_prefix="../",
        ),
    )
