"""Sitexport configuration.

ExportConfig is the central configuration object, frozen after creation.
ExportOptions and ProjectOptions carry the per-target knobs.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from sitexport._errors import ConfigError

_GROUP_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


@dataclass(frozen=True, slots=True)
class ExportOptions:
    """Options for the static target.

    Attributes:
        include_css: Write ``css/styles.css`` and link it; otherwise inline a ``<style>``.
        include_js: Write ``js/main.js`` and reference it; otherwise inline a ``<script>``.
        minify: Reserved. Accepted and ignored.
        single_page: Produce one self-contained HTML document with embedded images.

    """

    include_css: bool = True
    include_js: bool = True
    minify: bool = False
    single_page: bool = False


@dataclass(frozen=True, slots=True)
class ProjectOptions:
    """Maven coordinates and runtime versions for the server target.

    Attributes:
        project_name: Human-readable project name (pom ``<name>``).
        group_id: Maven group id, also the Java package prefix.
        artifact_id: Maven artifact id.
        version: Project version.
        spring_boot_version: Spring Boot parent version.
        java_version: Java release targeted by the build and the Dockerfile.

    """

    project_name: str = "my-site"
    group_id: str = "com.example"
    artifact_id: str = "my-site"
    version: str = "1.0.0"
    spring_boot_version: str = "3.2.0"
    java_version: str = "21"

    def __post_init__(self) -> None:
        if not _GROUP_ID_RE.match(self.group_id):
            msg = f"group_id {self.group_id!r} is not a valid Java package name"
            raise ConfigError(msg)
        if not self.java_package_segment:
            msg = f"artifact_id {self.artifact_id!r} has no usable characters"
            raise ConfigError(msg)

    @property
    def java_package_segment(self) -> str:
        """Artifact id reduced to a valid package segment (``my-site`` -> ``mysite``)."""
        return re.sub(r"[^a-z0-9]", "", self.artifact_id.lower())

    @property
    def java_package(self) -> str:
        """Fully qualified base package of the generated sources."""
        return f"{self.group_id}.{self.java_package_segment}"

    @property
    def java_source_dir(self) -> str:
        """Archive path of the base package directory."""
        return "src/main/java/" + self.java_package.replace(".", "/")

    @property
    def jar_name(self) -> str:
        """File name of the jar produced by ``mvn package``."""
        return f"{self.artifact_id}-{self.version}.jar"


@dataclass(frozen=True, slots=True)
class ExportConfig:
    """Configuration for an export run.

    Attributes:
        root: Directory the input and config file live in.
              Always resolved to an absolute path on construction.
        output: Output archive (``.zip``) or directory. Relative to ``root``.
        site_name: Site title used in README files.
        asset_base_url: Origin that root-relative asset URLs are fetched from.
        fetch_timeout_ms: Per-request timeout for asset downloads.
        options: Static target options.
        project: Server target options.

    """

    root: Path = field(default_factory=Path.cwd)
    output: Path = field(default_factory=lambda: Path("dist"))
    site_name: str = "My Site"
    asset_base_url: str = "http://localhost:8080"
    fetch_timeout_ms: int = 5000
    options: ExportOptions = field(default_factory=ExportOptions)
    project: ProjectOptions = field(default_factory=ProjectOptions)

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if self.fetch_timeout_ms <= 0:
            msg = f"fetch_timeout_ms must be positive, got {self.fetch_timeout_ms}"
            raise ConfigError(msg)
        if not self.asset_base_url.startswith(("http://", "https://")):
            msg = f"asset_base_url must be an http(s) URL, got {self.asset_base_url!r}"
            raise ConfigError(msg)

    @property
    def output_path(self) -> Path:
        """Absolute path to the output archive or directory."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    @property
    def writes_archive(self) -> bool:
        """True when the output is a zip file rather than a directory."""
        return self.output.suffix == ".zip"

    @property
    def fetch_timeout(self) -> float:
        """Fetch timeout in seconds."""
        return self.fetch_timeout_ms / 1000
