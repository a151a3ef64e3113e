from __future__ import annotations

import filecmp
import logging
from pathlib import Path
from typing import List

from .command import run_cmd
from .privilege import privileged

logger = logging.getLogger(__name__)

DEFAULT_REPO_DIR = "/etc/yum.repos.d"


def find_repo_files(src_dir: str | Path, pattern: str = "*.repo") -> List[Path]:
    d = Path(src_dir)
    if not d.is_dir():
        return []
    return sorted(p for p in d.glob(pattern) if p.is_file())


def copy_repo_files(
    files: List[Path],
    dest_dir: str = DEFAULT_REPO_DIR,
    *,
    use_sudo: bool = True,
    dry_run: bool = False,
) -> List[Path]:
    """Copy repo definitions into the package manager's config directory.

    Files already present with identical content are left alone.
    Returns the files that were copied.
    """

    d = Path(dest_dir)
    changed: List[Path] = []
    for f in files:
        out = d / f.name
        if out.is_file() and filecmp.cmp(str(f), str(out), shallow=False):
            logger.info("%s unchanged, skipping", out)
            continue
        changed.append(f)

    if not changed:
        return changed

    run_cmd(
        privileged(["cp", "--", *[str(f) for f in changed], str(d)], use_sudo=use_sudo),
        dry_run=dry_run,
    )
    logger.info("Registered %d repo file(s) in %s", len(changed), d)
    return changed
