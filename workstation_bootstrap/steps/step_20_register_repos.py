from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..lib.repos import copy_repo_files, find_repo_files
from ..state_store import record_applied

logger = logging.getLogger(__name__)


class RegisterReposStep:
    step_id = "20_register_repos"
    title = "Register package repositories"

    def applies(self, state: Dict[str, Any]) -> bool:
        cfg = config_from_state(state)
        return bool(find_repo_files(cfg.input_path("repo_files")))

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        files = find_repo_files(cfg.input_path("repo_files"))

        copied = copy_repo_files(files, cfg.repo_dir, use_sudo=cfg.use_sudo, dry_run=cfg.dry_run)

        record_applied(
            state,
            self.step_id,
            {"copied": [f.name for f in copied], "unchanged": [f.name for f in files if f not in copied]},
        )
        return state
