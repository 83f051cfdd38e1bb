"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from import_cache.paths import PathOutsideRootError, to_project_path

CONFIG_FILE_NAME = "import_cache.toml"
DEFAULT_OUTPUT_ROOT = "_build"
DATA_DIR_NAME = ".import_cache"

DEFAULT_MODULE_EXTENSIONS = (".hs",)
DEFAULT_NATIVE_EXTENSIONS = (
    ".cpp",
    ".cc",
    ".cxx",
    ".c",
    ".hpp",
    ".hh",
    ".hxx",
    ".h",
)


@dataclass(slots=True, frozen=True)
class LanguageConfig:
    """Settings for one import-rule family."""

    enabled: bool
    extensions: tuple[str, ...]
    keyword: str
    search_roots: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class BuildConfig:
    """Fully merged build configuration."""

    project_root: Path
    output_root: str
    module: LanguageConfig
    native: LanguageConfig

    @property
    def data_dir(self) -> Path:
        """Directory holding the build database and audit log."""
        return self.project_root / self.output_root / DATA_DIR_NAME

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "project_root": str(self.project_root),
            "output_root": self.output_root,
            "data_dir": str(self.data_dir),
            "module": _language_dict(self.module),
            "native": _language_dict(self.native),
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    output_root: str | None = None
    module_roots: tuple[str, ...] | None = None
    native_roots: tuple[str, ...] | None = None
    module_enabled: bool | None = None
    native_enabled: bool | None = None


def default_config(project_root: Path) -> BuildConfig:
    """Build default config for a given project root."""
    return BuildConfig(
        project_root=project_root.resolve(),
        output_root=DEFAULT_OUTPUT_ROOT,
        module=LanguageConfig(
            enabled=True,
            extensions=DEFAULT_MODULE_EXTENSIONS,
            keyword="import",
            search_roots=(".",),
        ),
        native=LanguageConfig(
            enabled=True,
            extensions=DEFAULT_NATIVE_EXTENSIONS,
            keyword="#include",
            search_roots=(".",),
        ),
    )


def load_project_config_file(project_root: Path) -> dict[str, object]:
    """Load optional import_cache.toml from the project root."""
    config_path = project_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _merge_language(
    base: LanguageConfig, payload: dict[str, object], section: str
) -> LanguageConfig:
    enabled = base.enabled
    if "enabled" in payload:
        raw_enabled = payload["enabled"]
        if not isinstance(raw_enabled, bool):
            raise ValueError(f"Config field '{section}.enabled' must be a boolean.")
        enabled = raw_enabled

    extensions = base.extensions
    if "extensions" in payload:
        extensions = _tuple_of_strings(payload["extensions"], section, "extensions")
        for extension in extensions:
            if not extension.startswith("."):
                raise ValueError(
                    f"Config field '{section}.extensions' entries must start with '.'."
                )

    keyword = base.keyword
    if "keyword" in payload:
        raw_keyword = payload["keyword"]
        if not isinstance(raw_keyword, str) or not raw_keyword.strip():
            raise ValueError(f"Config field '{section}.keyword' must be a non-empty string.")
        keyword = raw_keyword.strip()

    search_roots = base.search_roots
    if "search_roots" in payload:
        search_roots = _tuple_of_strings(payload["search_roots"], section, "search_roots")

    return LanguageConfig(
        enabled=enabled,
        extensions=extensions,
        keyword=keyword,
        search_roots=search_roots,
    )


def merge_config(
    base: BuildConfig, project_payload: dict[str, object], overrides: CliOverrides
) -> BuildConfig:
    """Merge defaults, project config, then CLI/startup overrides."""
    build_payload = _get_table(project_payload, "build")
    module_payload = _get_table(project_payload, "module")
    native_payload = _get_table(project_payload, "native")

    output_root = base.output_root
    if "output_root" in build_payload:
        raw_output_root = build_payload["output_root"]
        if not isinstance(raw_output_root, str):
            raise ValueError("Config field 'build.output_root' must be a string.")
        output_root = raw_output_root

    merged = BuildConfig(
        project_root=base.project_root,
        output_root=output_root,
        module=_merge_language(base.module, module_payload, "module"),
        native=_merge_language(base.native, native_payload, "native"),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: BuildConfig, overrides: CliOverrides) -> BuildConfig:
    """Apply startup overrides at highest precedence, then validate paths."""
    module = config.module
    if overrides.module_roots is not None:
        module = replace(module, search_roots=overrides.module_roots)
    if overrides.module_enabled is not None:
        module = replace(module, enabled=overrides.module_enabled)

    native = config.native
    if overrides.native_roots is not None:
        native = replace(native, search_roots=overrides.native_roots)
    if overrides.native_enabled is not None:
        native = replace(native, enabled=overrides.native_enabled)

    output_root = overrides.output_root or config.output_root
    return BuildConfig(
        project_root=config.project_root,
        output_root=_project_dir(config.project_root, output_root, "build.output_root"),
        module=replace(
            module,
            search_roots=_project_dirs(config.project_root, module.search_roots, "module"),
        ),
        native=replace(
            native,
            search_roots=_project_dirs(config.project_root, native.search_roots, "native"),
        ),
    )


def load_effective_config(
    project_root: Path, overrides: CliOverrides | None = None
) -> BuildConfig:
    """Load effective config using merge order defaults -> project config -> overrides."""
    resolved_root = project_root.resolve()
    base = default_config(resolved_root)
    payload = load_project_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _project_dir(project_root: Path, candidate: str, name: str) -> str:
    if not candidate.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty path.")
    try:
        return to_project_path(project_root, candidate)
    except PathOutsideRootError as exc:
        raise ValueError(
            f"Config field '{name}' must stay inside the project root: {exc.path}"
        ) from exc


def _project_dirs(
    project_root: Path, candidates: tuple[str, ...], section: str
) -> tuple[str, ...]:
    return tuple(
        _project_dir(project_root, candidate, f"{section}.search_roots")
        for candidate in candidates
    )


def _language_dict(language: LanguageConfig) -> dict[str, object]:
    return {
        "enabled": language.enabled,
        "extensions": list(language.extensions),
        "keyword": language.keyword,
        "search_roots": list(language.search_roots),
    }
