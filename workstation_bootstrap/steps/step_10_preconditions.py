from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from ..config import BootstrapConfig, config_from_state
from ..lib.tools import MissingToolError, command_exists, ensure_tool
from ..state_store import record_applied

logger = logging.getLogger(__name__)


def required_tools(cfg: BootstrapConfig) -> List[Tuple[str, str]]:
    """(command, input key) pairs; a tool is only needed when its input exists."""

    wanted = [
        ("flatpak", "flatpak_apps"),
        (cfg.pip_command, "pip_requirements"),
        (cfg.npm_command, "npm_manifest"),
        ("gsettings", "gsettings"),
        ("stow", "dotfiles"),
    ]
    return [(cmd, key) for cmd, key in wanted if cfg.has_input(key)]


class PreconditionsStep:
    step_id = "10_preconditions"
    title = "Check required tools"

    def applies(self, state: Dict[str, Any]) -> bool:
        return bool(required_tools(config_from_state(state)))

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        packages = cfg.tool_packages

        installed: List[str] = []
        for cmd, key in required_tools(cfg):
            package = packages.get(cmd)
            if package is None:
                if not command_exists(cmd):
                    raise MissingToolError(f"{cmd} is required by {cfg.files[key]} and no package is configured for it")
                continue
            if ensure_tool(
                cmd,
                package,
                dnf=cfg.package_manager,
                use_sudo=cfg.use_sudo,
                dry_run=cfg.dry_run,
            ):
                installed.append(package)

        record_applied(state, self.step_id, {"installed": installed})
        logger.info("Tools ready (installed: %s)", ", ".join(installed) or "none")
        return state
