from __future__ import annotations

import logging
import os
import subprocess
import threading
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

DEFAULT_KEEPALIVE_INTERVAL = 60.0


def is_root() -> bool:
    return os.geteuid() == 0


TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def parse_bool(value: object, name: str) -> bool:
    """Read a YAML flag; quoted words like "false" count, anything else is an error."""

    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise ValueError(f"{name} must be true or false (got {value!r})")


def resolve_use_sudo(mode: object) -> bool:
    """Map the config value (auto|true|false) to a decision."""

    if isinstance(mode, str) and mode.strip().lower() in {"auto", ""}:
        return not is_root()
    try:
        return parse_bool(mode, "sudo")
    except ValueError:
        raise ValueError(f"sudo must be auto, true or false (got {mode!r})") from None


def privileged(argv: Sequence[str], *, use_sudo: bool) -> list[str]:
    if use_sudo:
        return ["sudo", *argv]
    return list(argv)


class SudoKeepAlive:
    """Refresh the sudo timestamp in the background for the run's duration.

    The thread shares nothing with the pipeline. It exits when stop() is
    called or when the main thread has finished.
    """

    def __init__(self, interval: float = DEFAULT_KEEPALIVE_INTERVAL) -> None:
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def _parent_alive(self) -> bool:
        return threading.main_thread().is_alive()

    def refresh(self) -> bool:
        p = subprocess.run(
            ["sudo", "-n", "-v"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        if p.returncode != 0:
            logger.debug("sudo refresh returned %s", p.returncode)
        return p.returncode == 0

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            if not self._parent_alive():
                break
            self.refresh()
        logger.debug("sudo keep-alive stopped")

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._loop, name="sudo-keepalive", daemon=True)
        self._thread.start()
        logger.debug("sudo keep-alive started (interval=%ss)", self.interval)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def __enter__(self) -> "SudoKeepAlive":
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()


def prime_sudo(*, dry_run: bool = False) -> None:
    """Ask for the password once, up front, so later steps do not prompt."""

    run_cmd(["sudo", "-v"], capture=False, dry_run=dry_run)
