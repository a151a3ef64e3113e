from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..lib.lang import npm_install_global, pip_install_requirements
from ..lib.lists import read_npm_manifest
from ..state_store import record_applied

logger = logging.getLogger(__name__)


class InstallPipPackagesStep:
    step_id = "50_install_pip"
    title = "Install user pip packages"

    def applies(self, state: Dict[str, Any]) -> bool:
        return config_from_state(state).has_input("pip_requirements")

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        requirements = cfg.input_path("pip_requirements")
        pip_install_requirements(str(requirements), pip=cfg.pip_command, dry_run=cfg.dry_run)
        record_applied(state, self.step_id, {"requirements": str(requirements)})
        return state


class InstallNpmPackagesStep:
    step_id = "55_install_npm"
    title = "Install global npm packages"

    def applies(self, state: Dict[str, Any]) -> bool:
        return config_from_state(state).has_input("npm_manifest")

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        # Only the names are used; npm picks versions itself.
        packages = read_npm_manifest(cfg.input_path("npm_manifest"))

        if not packages:
            logger.info("%s lists no packages", cfg.files["npm_manifest"])
        npm_install_global(packages, npm=cfg.npm_command, use_sudo=cfg.npm_use_sudo, dry_run=cfg.dry_run)

        record_applied(state, self.step_id, {"packages": packages})
        return state
