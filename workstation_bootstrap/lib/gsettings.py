from __future__ import annotations

import logging

from .command import run_cmd
from .lists import GSetting

logger = logging.getLogger(__name__)


def gsettings_set(entry: GSetting, *, dry_run: bool = False) -> None:
    # Setting a value that is already in place is a no-op for gsettings.
    run_cmd(["gsettings", "set", entry.schema, entry.key, entry.value], dry_run=dry_run)
