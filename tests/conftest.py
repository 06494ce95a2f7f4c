"""
Shared pytest fixtures for the site source tests.

This file contains reusable fixtures for:
- Data source parameters
- In-memory site trees (MemoryFileSystem)
- On-disk site trees (tmp_path)
"""

import os
from typing import Any, Callable, Dict

import pytest

from sitesource.ingest.filesystem import MemoryFileSystem

TEXT_EXTENSIONS = ["html", "html.twig", "twig", "md", "markdown", "txt", "css", "xml"]

# 2020-05-01T10:00:00Z
FIXED_MTIME = 1588327200.0


# ============================================================================
# Parameters
# ============================================================================


@pytest.fixture
def params() -> Dict[str, Any]:
    """Parameters for a site rooted at /site."""
    return {
        "source_root": "/site",
        "text_extensions": list(TEXT_EXTENSIONS),
    }


@pytest.fixture
def make_params() -> Callable[..., Dict[str, Any]]:
    """Factory for parameters with overrides."""

    def _make(**overrides) -> Dict[str, Any]:
        base = {"source_root": "/site", "text_extensions": list(TEXT_EXTENSIONS)}
        base.update(overrides)
        return base

    return _make


# ============================================================================
# In-memory site
# ============================================================================


@pytest.fixture
def site_files() -> Dict[str, Any]:
    """A small but complete site source tree."""
    return {
        "/site/content/index.html": "---\ntitle: Home\nlayout: default\n---\n<h1>Welcome</h1>\n",
        "/site/content/about.md": "# About\n\nNo metadata here.\n",
        "/site/content/posts/2020-05-01-hello-world.md": "Hello world post\n",
        "/site/content/posts/tech/2020-01-01-post.md": "---\ntags: [python, yaml]\n---\nTech post\n",
        "/site/content/posts/tech/python/2019-12-31-deep.md": "Deep post\n",
        "/site/content/assets/logo.png": b"\x89PNG\r\n\x1a\n",
        "/site/content/sitemap.xml": "<urlset/>\n",
        "/site/content/sitemap.xml.meta": "title: Sitemap\npriority: 0.5\n",
        "/site/layouts/default.html.twig": "---\nname: default\n---\n{{ page.content }}\n",
        "/site/includes/header.html": "---\nnot: parsed\n---\n<header/>\n",
    }


@pytest.fixture
def memory_fs(site_files) -> MemoryFileSystem:
    """MemoryFileSystem holding site_files."""
    return MemoryFileSystem(site_files, default_mtime=FIXED_MTIME)


@pytest.fixture
def processed_source(params, memory_fs):
    """A FilesystemDataSource that already ran over memory_fs."""
    from sitesource.ingest.pipeline import FilesystemDataSource

    source = FilesystemDataSource(params, fs=memory_fs)
    source.configure()
    source.process()
    return source


# ============================================================================
# On-disk site
# ============================================================================


@pytest.fixture
def write_site(tmp_path) -> Callable[[Dict[str, Any]], str]:
    """Write a {relative_path: content} tree under tmp_path/src and return the root."""

    def _write(files: Dict[str, Any]) -> str:
        root = tmp_path / "src"
        root.mkdir(exist_ok=True)
        for relative_path, content in files.items():
            target = root / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
            os.utime(target, (FIXED_MTIME, FIXED_MTIME))
        return str(root)

    return _write
