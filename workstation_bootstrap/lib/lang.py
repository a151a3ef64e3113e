from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd
from .privilege import privileged

logger = logging.getLogger(__name__)


def pip_install_requirements(requirements: str, *, pip: str = "pip3", dry_run: bool = False) -> None:
    """User-level install; the requirements file is handed to pip as-is."""

    run_cmd([pip, "install", "--user", "-r", requirements], capture=False, dry_run=dry_run)


def npm_install_global(
    packages: Sequence[str],
    *,
    npm: str = "npm",
    use_sudo: bool = False,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    run_cmd(
        privileged([npm, "install", "-g", *packages], use_sudo=use_sudo),
        capture=False,
        dry_run=dry_run,
    )
