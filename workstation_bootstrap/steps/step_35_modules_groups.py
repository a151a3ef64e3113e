from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..lib.lists import read_name_list
from ..lib.pkg import dnf_group_install, dnf_module_enable
from ..state_store import record_applied

logger = logging.getLogger(__name__)


class EnableModulesStep:
    step_id = "35_enable_modules"
    title = "Enable package modules"

    def applies(self, state: Dict[str, Any]) -> bool:
        return config_from_state(state).has_input("modules")

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        modules = read_name_list(cfg.input_path("modules"))
        dnf_module_enable(modules, dnf=cfg.package_manager, use_sudo=cfg.use_sudo, dry_run=cfg.dry_run)
        record_applied(state, self.step_id, {"modules": modules})
        return state


class InstallGroupsStep:
    step_id = "36_install_groups"
    title = "Install package groups"

    def applies(self, state: Dict[str, Any]) -> bool:
        return config_from_state(state).has_input("groups")

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        groups = read_name_list(cfg.input_path("groups"))
        dnf_group_install(groups, dnf=cfg.package_manager, use_sudo=cfg.use_sudo, dry_run=cfg.dry_run)
        record_applied(state, self.step_id, {"groups": groups})
        return state
