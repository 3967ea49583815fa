"""Configuration management for pageserve.

Supports TOML configuration format with auto-discovery and named presets.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "pageserve.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8082
    cert_file: Path = field(default_factory=lambda: Path("server.crt"))
    key_file: Path = field(default_factory=lambda: Path("server.key"))


@dataclass
class FilesConfig:
    """File resolution configuration."""

    root_dir: Path = field(default_factory=lambda: Path("."))
    default_document: str = "index.html"
    allow_list: list[str] = field(default_factory=list)
    fallback_prefix: str = "../"


PRESETS: dict[str, FilesConfig] = {
    "plain": FilesConfig(
        default_document="index.html",
        allow_list=[],
        fallback_prefix="",
    ),
    "browsertestjs": FilesConfig(
        default_document="test.html",
        allow_list=[
            "test_run.js",
            "test.js",
            "browsertestjs.png",
            "cyphrme_bootstrap.min.css",
        ],
    ),
    "urlform": FilesConfig(
        default_document="index.html",
        allow_list=[
            "test_run.js",
            "test.js",
            "example.js",
            "urlform.js",
            "fragment_text_demonstration.html",
        ],
    ),
}


def get_preset(name: str) -> FilesConfig:
    """Return a copy of a built-in preset.

    Raises:
        ValueError: If no preset has that name
    """
    try:
        preset = PRESETS[name]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise ValueError(f"Unknown preset: {name} (known: {known})") from None
    return replace(preset, allow_list=list(preset.allow_list))


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    files: FilesConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for pageserve.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(server=ServerConfig(), files=FilesConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        config_dir = path.parent

        server = cls._parse_server(data.get("server"), config_dir)
        files = cls._parse_files(data.get("files"), config_dir)

        return cls(server=server, files=files, config_path=path)

    @classmethod
    def _parse_server(cls, data: object, config_dir: Path) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig(
                cert_file=config_dir / "server.crt",
                key_file=config_dir / "server.key",
            )

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "0.0.0.0")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8082)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")
        if not 0 <= port <= 65535:
            raise ValueError("server.port must be between 0 and 65535")

        cert_file = data.get("cert_file", "server.crt")
        if not isinstance(cert_file, str):
            raise ValueError("server.cert_file must be a string")

        key_file = data.get("key_file", "server.key")
        if not isinstance(key_file, str):
            raise ValueError("server.key_file must be a string")

        return ServerConfig(
            host=host,
            port=port,
            cert_file=config_dir / cert_file,
            key_file=config_dir / key_file,
        )

    @classmethod
    def _parse_files(cls, data: object, config_dir: Path) -> FilesConfig:
        """Parse files configuration section.

        A preset, when named, supplies the defaults for the remaining keys.

        Args:
            data: Raw files section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            FilesConfig instance
        """
        if data is None:
            return FilesConfig(root_dir=config_dir)

        if not isinstance(data, dict):
            raise ValueError("files section must be a dictionary")

        preset_name = data.get("preset")
        if preset_name is None:
            base = FilesConfig()
        elif isinstance(preset_name, str):
            base = get_preset(preset_name)
        else:
            raise ValueError("files.preset must be a string")

        root_dir = data.get("root_dir", ".")
        if not isinstance(root_dir, str):
            raise ValueError("files.root_dir must be a string")

        default_document = data.get("default_document", base.default_document)
        if not isinstance(default_document, str):
            raise ValueError("files.default_document must be a string")
        if not default_document:
            raise ValueError("files.default_document must not be empty")

        allow_list_raw = data.get("allow_list", base.allow_list)
        if not isinstance(allow_list_raw, list):
            raise ValueError("files.allow_list must be a list")
        allow_list: list[str] = []
        for item in allow_list_raw:
            if not isinstance(item, str):
                raise ValueError("files.allow_list items must be strings")
            allow_list.append(item)

        fallback_prefix = data.get("fallback_prefix", base.fallback_prefix)
        if not isinstance(fallback_prefix, str):
            raise ValueError("files.fallback_prefix must be a string")

        return FilesConfig(
            root_dir=config_dir / root_dir,
            default_document=default_document,
            allow_list=allow_list,
            fallback_prefix=fallback_prefix,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        cert_file: Path | None = None,
        key_file: Path | None = None,
        root_dir: Path | None = None,
        preset: str | None = None,
        default_document: str | None = None,
        allow_list: list[str] | None = None,
        fallback_prefix: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. A preset replaces
        the resolution fields first; the individual overrides then apply on
        top of it. The root directory is kept from the existing config unless
        overridden.

        Returns:
            New Config instance with overrides applied
        """
        server = replace(
            self.server,
            host=host if host is not None else self.server.host,
            port=port if port is not None else self.server.port,
            cert_file=cert_file if cert_file is not None else self.server.cert_file,
            key_file=key_file if key_file is not None else self.server.key_file,
        )

        files = self.files
        if preset is not None:
            files = replace(get_preset(preset), root_dir=self.files.root_dir)
        files = replace(
            files,
            root_dir=root_dir if root_dir is not None else files.root_dir,
            default_document=(
                default_document
                if default_document is not None
                else files.default_document
            ),
            allow_list=(
                list(allow_list) if allow_list is not None else list(files.allow_list)
            ),
            fallback_prefix=(
                fallback_prefix if fallback_prefix is not None else files.fallback_prefix
            ),
        )

        return replace(self, server=server, files=files)
