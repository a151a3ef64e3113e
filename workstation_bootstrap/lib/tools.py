from __future__ import annotations

import logging
import shutil

from .pkg import dnf_install

logger = logging.getLogger(__name__)


class MissingToolError(RuntimeError):
    """A required command is still absent after installing its package."""


def command_exists(name: str) -> bool:
    found = shutil.which(name)
    logger.debug("Command %s found: %s", name, bool(found))
    return bool(found)


def ensure_tool(
    name: str,
    package: str,
    *,
    dnf: str = "dnf",
    use_sudo: bool = True,
    dry_run: bool = False,
) -> bool:
    """Make sure `name` is on PATH, installing `package` if it is not.

    Returns True when the package had to be installed. The lookup/install
    race is harmless: dnf treats an already installed package as a no-op.
    """

    if command_exists(name):
        return False

    logger.info("%s missing; installing %s", name, package)
    dnf_install([package], dnf=dnf, use_sudo=use_sudo, dry_run=dry_run)

    if dry_run:
        return True
    if not command_exists(name):
        raise MissingToolError(f"{name} still not found after installing {package}")
    return True
