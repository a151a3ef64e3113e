from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .lib.flatpak import FLATHUB_URL
from .lib.privilege import DEFAULT_KEEPALIVE_INTERVAL, parse_bool, resolve_use_sudo
from .lib.repos import DEFAULT_REPO_DIR

DEFAULT_CONFIG_NAME = "bootstrap.yaml"

# Input names are fixed by convention; bootstrap.yaml may rename them.
DEFAULT_FILES: Dict[str, str] = {
    "repo_files": "repo-files",
    "packages": "pkglist.txt",
    "modules": "modules.txt",
    "groups": "groups.txt",
    "flatpak_apps": "flatpak-apps.txt",
    "pip_requirements": "pip3-packages.txt",
    "npm_manifest": "npm-global.json",
    "gsettings": "gsettings.conf",
    "dotfiles": "home",
}
DIRECTORY_INPUTS = frozenset({"repo_files", "dotfiles"})

# command -> package that provides it
DEFAULT_TOOL_PACKAGES: Dict[str, str] = {
    "flatpak": "flatpak",
    "pip3": "python3-pip",
    "npm": "nodejs-npm",
    "gsettings": "glib2",
    "stow": "stow",
}


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"config.{name} must be a mapping")
    return value


def _flag(mapping: Dict[str, Any], key: str, default: bool, name: str) -> bool:
    value = mapping.get(key)
    if value is None:
        return default
    return parse_bool(value, name)


@dataclass(frozen=True)
class BootstrapConfig:
    raw: Dict[str, Any]

    @property
    def source_dir(self) -> Path:
        return Path(str(self.raw.get("source_dir") or ".")).expanduser()

    @property
    def dry_run(self) -> bool:
        return _flag(self.raw, "dry_run", False, "config.dry_run")

    @property
    def use_sudo(self) -> bool:
        return resolve_use_sudo(self.raw.get("sudo", "auto"))

    @property
    def package_manager(self) -> str:
        return str(self.raw.get("package_manager") or "dnf")

    @property
    def repo_dir(self) -> str:
        return str(self.raw.get("repo_dir") or DEFAULT_REPO_DIR)

    @property
    def files(self) -> Dict[str, str]:
        merged = dict(DEFAULT_FILES)
        merged.update({str(k): str(v) for k, v in _section(self.raw, "files").items()})
        return merged

    def input_path(self, key: str) -> Path:
        return self.source_dir / self.files[key]

    def has_input(self, key: str) -> bool:
        p = self.input_path(key)
        if key in DIRECTORY_INPUTS:
            return p.is_dir()
        return p.is_file()

    @property
    def flatpak_remote(self) -> str:
        return str(_section(self.raw, "flatpak").get("remote") or "flathub")

    @property
    def flatpak_remote_url(self) -> Optional[str]:
        flatpak = _section(self.raw, "flatpak")
        if "remote_url" in flatpak:
            # An explicit null disables remote registration.
            return str(flatpak["remote_url"]) if flatpak["remote_url"] else None
        return FLATHUB_URL

    @property
    def flatpak_user(self) -> bool:
        return _flag(_section(self.raw, "flatpak"), "user", False, "config.flatpak.user")

    @property
    def pip_command(self) -> str:
        return str(_section(self.raw, "pip").get("command") or "pip3")

    @property
    def npm_command(self) -> str:
        return str(_section(self.raw, "npm").get("command") or "npm")

    @property
    def npm_use_sudo(self) -> bool:
        return _flag(_section(self.raw, "npm"), "sudo", False, "config.npm.sudo")

    @property
    def stow_target(self) -> str:
        target = _section(self.raw, "stow").get("target") or os.environ.get("HOME") or "~"
        return str(Path(str(target)).expanduser())

    @property
    def tool_packages(self) -> Dict[str, str]:
        merged = dict(DEFAULT_TOOL_PACKAGES)
        merged.update({str(k): str(v) for k, v in _section(self.raw, "tools").items()})
        return merged

    @property
    def sudo_keepalive(self) -> bool:
        return _flag(_section(self.raw, "sudo_keepalive"), "enabled", True, "config.sudo_keepalive.enabled")

    @property
    def sudo_keepalive_interval(self) -> float:
        return float(_section(self.raw, "sudo_keepalive").get("interval") or DEFAULT_KEEPALIVE_INTERVAL)

    def validate(self) -> None:
        """Read every flag once so a bad value is reported before any step runs."""

        for name in ("dry_run", "use_sudo", "flatpak_user", "npm_use_sudo", "sudo_keepalive"):
            getattr(self, name)


def config_from_state(state: Dict[str, Any]) -> BootstrapConfig:
    return BootstrapConfig(raw=state.get("config") or {})


def load_bootstrap_config(path: str) -> BootstrapConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("bootstrap config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read bootstrap.yaml") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p.name} must contain a mapping/object")

    # Relative source_dir is resolved against the config file's directory.
    src = raw.get("source_dir")
    if src is None:
        raw["source_dir"] = str(p.parent)
    elif not Path(str(src)).expanduser().is_absolute():
        raw["source_dir"] = str(p.parent / str(src))

    return BootstrapConfig(raw=raw)
