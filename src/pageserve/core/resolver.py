"""Request path resolution.

Maps a URL path onto a file path relative to the serving root.
"""

import posixpath
import re

from pageserve.config import FilesConfig

_REPEATED_SLASHES = re.compile(r"/{2,}")


def clean_path(url_path: str) -> str:
    """Return the canonical form of a URL path.

    Repeated slashes are merged and ``.``/``..`` segments are collapsed
    without climbing above ``/``. A trailing slash is kept.
    """
    if not url_path:
        return "/"
    if not url_path.startswith("/"):
        url_path = f"/{url_path}"
    cleaned = posixpath.normpath(_REPEATED_SLASHES.sub("/", url_path))
    if url_path.endswith("/") and cleaned != "/":
        cleaned += "/"
    return cleaned


def contains_dot_dot(url_path: str) -> bool:
    """Check for a ``..`` segment, treating backslashes as separators too."""
    if ".." not in url_path:
        return False
    segments = url_path.replace("\\", "/").split("/")
    return ".." in segments


class PathResolver:
    """Resolve URL paths against a default document and an allow-list.

    Allow-listed names are served from the serving root as-is. Every other
    non-empty path gets the fallback prefix, which by default points one
    directory above the root. The prefix is a development convenience and
    offers no access control.
    """

    def __init__(
        self,
        default_document: str = "index.html",
        allow_list: list[str] | None = None,
        fallback_prefix: str = "../",
    ) -> None:
        self.default_document = default_document
        self.allow_list = frozenset(allow_list or ())
        self.fallback_prefix = fallback_prefix

    @classmethod
    def from_config(cls, config: FilesConfig) -> "PathResolver":
        return cls(
            default_document=config.default_document,
            allow_list=config.allow_list,
            fallback_prefix=config.fallback_prefix,
        )

    def resolve(self, url_path: str) -> str:
        """Resolve a URL path to a relative file path.

        Args:
            url_path: Decoded request path, e.g. ``/test.js``

        Returns:
            File path relative to the serving root
        """
        file_path = url_path[1:] if url_path.startswith("/") else url_path
        if not file_path:
            return self.default_document
        if file_path in self.allow_list:
            return file_path
        return self.fallback_prefix + file_path
