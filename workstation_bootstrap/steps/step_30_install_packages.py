from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..lib.lists import read_name_list
from ..lib.pkg import dnf_install
from ..state_store import record_applied

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "30_install_packages"
    title = "Install OS packages"

    def applies(self, state: Dict[str, Any]) -> bool:
        return config_from_state(state).has_input("packages")

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        packages = read_name_list(cfg.input_path("packages"))

        if not packages:
            logger.info("%s lists no packages", cfg.files["packages"])
        # One transaction for the whole list: a single privilege prompt, and
        # dnf resolves everything together.
        dnf_install(packages, dnf=cfg.package_manager, use_sudo=cfg.use_sudo, dry_run=cfg.dry_run)

        record_applied(state, self.step_id, {"packages": packages})
        logger.info("Packages requested: %d", len(packages))
        return state
