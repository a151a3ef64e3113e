from __future__ import annotations

import logging
from typing import List

from .command import run_cmd

logger = logging.getLogger(__name__)

FLATHUB_URL = "https://dl.flathub.org/repo/flathub.flatpakrepo"


def _scope(user: bool) -> List[str]:
    return ["--user"] if user else []


def flatpak_add_remote(name: str, url: str, *, user: bool = False, dry_run: bool = False) -> None:
    run_cmd(
        ["flatpak", "remote-add", *_scope(user), "--if-not-exists", name, url],
        dry_run=dry_run,
    )


def flatpak_is_installed(app_id: str, *, user: bool = False, dry_run: bool = False) -> bool:
    """Return True if the app id is already installed.

    In dry-run nothing is queried, so every app counts as missing and the
    full install plan is logged.
    """
    if dry_run:
        return False
    r = run_cmd(["flatpak", "info", *_scope(user), app_id], check=False)
    return r.returncode == 0


def flatpak_install(remote: str, app_id: str, *, user: bool = False, dry_run: bool = False) -> None:
    run_cmd(
        ["flatpak", "install", *_scope(user), "-y", "--noninteractive", remote, app_id],
        capture=False,
        dry_run=dry_run,
    )
