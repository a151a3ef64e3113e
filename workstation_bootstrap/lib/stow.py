from __future__ import annotations

import logging

from .command import run_cmd

logger = logging.getLogger(__name__)


def stow_restow(stow_dir: str, package: str, target: str, *, dry_run: bool = False) -> None:
    """Unlink then relink `stow_dir/package` into `target`.

    --restow makes repeated runs converge on the same link farm.
    """

    run_cmd(
        ["stow", "--restow", f"--dir={stow_dir}", f"--target={target}", package],
        dry_run=dry_run,
    )
