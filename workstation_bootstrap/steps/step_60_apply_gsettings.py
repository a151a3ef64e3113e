from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..lib.gsettings import gsettings_set
from ..lib.lists import read_gsettings
from ..state_store import record_applied

logger = logging.getLogger(__name__)


class ApplyGsettingsStep:
    step_id = "60_apply_gsettings"
    title = "Apply desktop settings"

    def applies(self, state: Dict[str, Any]) -> bool:
        return config_from_state(state).has_input("gsettings")

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        # Parse the whole file first so a bad line aborts before anything is set.
        entries = read_gsettings(cfg.input_path("gsettings"))

        for entry in entries:
            gsettings_set(entry, dry_run=cfg.dry_run)

        record_applied(
            state,
            self.step_id,
            {"settings": [[e.schema, e.key, e.value] for e in entries]},
        )
        logger.info("Applied %d setting(s)", len(entries))
        return state
