from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd
from .privilege import privileged

logger = logging.getLogger(__name__)


def dnf_install(
    packages: Sequence[str],
    *,
    dnf: str = "dnf",
    use_sudo: bool = True,
    dry_run: bool = False,
) -> None:
    """Install all packages in one transaction; dnf reports "Nothing to do" on re-runs."""

    if not packages:
        return
    run_cmd(privileged([dnf, "install", "-y", *packages], use_sudo=use_sudo), capture=False, dry_run=dry_run)


def dnf_module_enable(
    modules: Sequence[str],
    *,
    dnf: str = "dnf",
    use_sudo: bool = True,
    dry_run: bool = False,
) -> None:
    if not modules:
        return
    run_cmd(
        privileged([dnf, "module", "enable", "-y", *modules], use_sudo=use_sudo),
        capture=False,
        dry_run=dry_run,
    )


def dnf_group_install(
    groups: Sequence[str],
    *,
    dnf: str = "dnf",
    use_sudo: bool = True,
    dry_run: bool = False,
) -> None:
    if not groups:
        return
    run_cmd(
        privileged([dnf, "group", "install", "-y", *groups], use_sudo=use_sudo),
        capture=False,
        dry_run=dry_run,
    )
