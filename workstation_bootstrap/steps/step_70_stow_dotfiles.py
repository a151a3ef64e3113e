from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..lib.stow import stow_restow
from ..state_store import record_applied

logger = logging.getLogger(__name__)


class StowDotfilesStep:
    step_id = "70_stow_dotfiles"
    title = "Link dotfiles"

    def applies(self, state: Dict[str, Any]) -> bool:
        return config_from_state(state).has_input("dotfiles")

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        tree = cfg.input_path("dotfiles")
        target = cfg.stow_target

        stow_restow(str(tree.parent), tree.name, target, dry_run=cfg.dry_run)

        record_applied(state, self.step_id, {"package": tree.name, "target": target})
        logger.info("Dotfiles from %s linked into %s", tree, target)
        return state
