from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


class FakeRunner:
    """Stands in for subprocess.run; records argv and answers by prefix."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self._rules: List[tuple[List[str], int, str]] = []
        self.on_call: Optional[Callable[[List[str]], None]] = None

    def returns(self, *prefix: str, returncode: int = 0, stdout: str = "") -> None:
        self._rules.append((list(prefix), returncode, stdout))

    def __call__(self, argv: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess:
        argv_list = list(argv)
        self.calls.append(argv_list)
        if self.on_call is not None:
            self.on_call(argv_list)

        rc, out = 0, ""
        for prefix, code, stdout in self._rules:
            if argv_list[: len(prefix)] == prefix:
                rc, out = code, stdout

        captured = kwargs.get("stdout") is subprocess.PIPE
        return subprocess.CompletedProcess(
            argv_list,
            rc,
            stdout=out if captured else None,
            stderr="" if captured else None,
        )

    def commands(self, program: str) -> List[List[str]]:
        return [c for c in self.calls if c and c[0] == program]


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    fake = FakeRunner()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def tools_on_path(monkeypatch: pytest.MonkeyPatch) -> Dict[str, bool]:
    """Commands mapped to presence; anything not listed is present."""

    import shutil

    present: Dict[str, bool] = {}

    def which(name: str, *args: Any, **kwargs: Any) -> Optional[str]:
        return f"/usr/bin/{name}" if present.get(name, True) else None

    monkeypatch.setattr(shutil, "which", which)
    return present


@pytest.fixture
def source(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    src.mkdir()
    return src


@pytest.fixture
def make_state(source: Path, tmp_path: Path) -> Callable[..., Dict[str, Any]]:
    from workstation_bootstrap.state_store import ensure_defaults

    def _make(**config: Any) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {
            "source_dir": str(source),
            "sudo": False,
            "repo_dir": str(tmp_path / "yum.repos.d"),
            "stow": {"target": str(tmp_path / "home-target")},
        }
        cfg.update(config)
        return ensure_defaults({"config": cfg})

    return _make


@pytest.fixture(autouse=True)
def _reset_logging() -> Any:
    yield
    root = logging.getLogger()
    if getattr(root, "_bootstrap_configured", False):
        # Only the handlers configure_logging() adds; pytest's own are subclasses.
        for h in root.handlers[:]:
            if type(h) in (logging.FileHandler, logging.StreamHandler):
                root.removeHandler(h)
                h.close()
    for attr in ("_bootstrap_configured", "_bootstrap_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
