from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..config import config_from_state
from ..lib.flatpak import flatpak_add_remote, flatpak_install, flatpak_is_installed
from ..lib.lists import read_line_list
from ..state_store import record_applied

logger = logging.getLogger(__name__)


class InstallFlatpaksStep:
    step_id = "40_install_flatpaks"
    title = "Install Flatpak applications"

    def applies(self, state: Dict[str, Any]) -> bool:
        return config_from_state(state).has_input("flatpak_apps")

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        apps = read_line_list(cfg.input_path("flatpak_apps"))
        user = cfg.flatpak_user

        if apps and cfg.flatpak_remote_url:
            flatpak_add_remote(cfg.flatpak_remote, cfg.flatpak_remote_url, user=user, dry_run=cfg.dry_run)

        installed: List[str] = []
        present: List[str] = []
        # Per-app loop: the installed check has to run for each id.
        for app_id in apps:
            if flatpak_is_installed(app_id, user=user, dry_run=cfg.dry_run):
                logger.info("%s already installed", app_id)
                present.append(app_id)
                continue
            flatpak_install(cfg.flatpak_remote, app_id, user=user, dry_run=cfg.dry_run)
            installed.append(app_id)

        record_applied(state, self.step_id, {"installed": installed, "already_installed": present})
        logger.info("Flatpaks installed=%d already present=%d", len(installed), len(present))
        return state
