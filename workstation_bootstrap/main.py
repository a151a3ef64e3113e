from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_CONFIG_NAME, BootstrapConfig, config_from_state, load_bootstrap_config
from .lib.command import CommandError
from .lib.privilege import SudoKeepAlive, prime_sudo
from .lib.tools import command_exists
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import Step, run_pipeline, select_steps
from .state_store import ensure_defaults, save_report
from .steps import (
    ApplyGsettingsStep,
    EnableModulesStep,
    InstallFlatpaksStep,
    InstallGroupsStep,
    InstallNpmPackagesStep,
    InstallPackagesStep,
    InstallPipPackagesStep,
    PreconditionsStep,
    RegisterReposStep,
    StowDotfilesStep,
)
from .steps.step_10_preconditions import required_tools

logger = logging.getLogger(__name__)

# Steps whose commands go through sudo.
PRIVILEGED_STEPS = {"20_register_repos", "30_install_packages", "35_enable_modules", "36_install_groups"}


def build_steps() -> List[Step]:
    return [
        PreconditionsStep(),
        RegisterReposStep(),
        InstallPackagesStep(),
        EnableModulesStep(),
        InstallGroupsStep(),
        InstallFlatpaksStep(),
        InstallPipPackagesStep(),
        InstallNpmPackagesStep(),
        ApplyGsettingsStep(),
        StowDotfilesStep(),
    ]


def resolve_config(source_dir: Optional[str], config_path: Optional[str]) -> BootstrapConfig:
    """Explicit --config wins; otherwise pick up bootstrap.yaml from the source dir."""

    if config_path:
        cfg = load_bootstrap_config(config_path)
    else:
        candidate = Path(source_dir or ".") / DEFAULT_CONFIG_NAME
        if candidate.is_file():
            cfg = load_bootstrap_config(str(candidate))
        else:
            cfg = BootstrapConfig(raw={})

    raw = dict(cfg.raw)
    if source_dir is not None:
        raw["source_dir"] = source_dir
    cfg = BootstrapConfig(raw=raw)
    cfg.validate()
    return cfg


def needs_sudo(
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> bool:
    """True when a step inside the start_at/stop_after window will run something through sudo."""

    cfg = config_from_state(state)
    if not cfg.use_sudo:
        return False
    for _, step in select_steps(steps, start_at, stop_after):
        if step.step_id == PreconditionsStep.step_id:
            # Only privileged when a tool is missing and dnf has to install it.
            packages = cfg.tool_packages
            privileged = any(
                cmd in packages and not command_exists(cmd) for cmd, _ in required_tools(cfg)
            )
        else:
            privileged = step.step_id in PRIVILEGED_STEPS or (
                step.step_id == InstallNpmPackagesStep.step_id and cfg.npm_use_sudo
            )
        if privileged and step.applies(state):
            return True
    return False


def run(
    *,
    source_dir: Optional[str] = None,
    config_path: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    report_path: Optional[str] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    no_sudo: bool = False,
) -> Dict[str, Any]:
    """Run the provisioning pipeline; the first failure aborts the run."""

    actual_log_path = configure_logging(log_path=log_path)

    try:
        cfg = resolve_config(source_dir, config_path)
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Invalid configuration: %s", e)
        raise

    state = ensure_defaults({"config": dict(cfg.raw)})
    if dry_run:
        state["config"]["dry_run"] = True
    if no_sudo:
        state["config"]["sudo"] = False
    state["execution"]["log_path"] = actual_log_path

    cfg = config_from_state(state)
    logger.info("Bootstrapping from %s%s", cfg.source_dir.resolve(), " (dry run)" if cfg.dry_run else "")

    steps = build_steps()
    keepalive: Optional[SudoKeepAlive] = None

    try:
        if needs_sudo(state, steps, start_at, stop_after):
            prime_sudo(dry_run=cfg.dry_run)
            if cfg.sudo_keepalive and not cfg.dry_run:
                keepalive = SudoKeepAlive(interval=cfg.sudo_keepalive_interval)
                keepalive.start()

        result = run_pipeline(
            state=state,
            steps=steps,
            start_at=start_at,
            stop_after=stop_after,
        )
        state = result.state
        state["execution"]["ran_steps"] = result.ran_steps
        state["execution"]["skipped_steps"] = result.skipped_steps
        logger.info("Setup complete! (applied %d, skipped %d)", len(result.ran_steps), len(result.skipped_steps))
        return state
    except Exception as e:
        step_id = (state.get("execution") or {}).get("current_step")
        logger.error("Bootstrap failed%s: %s", f" in {step_id}" if step_id else "", e)
        logger.debug("Failure details", exc_info=True)
        state.setdefault("execution", {}).setdefault("errors", []).append({"step": step_id, "error": str(e)})
        raise
    finally:
        if keepalive is not None:
            keepalive.stop()
        if report_path:
            try:
                save_report(report_path, state)
            except OSError as e:
                # A failed report write never replaces the run's outcome.
                logger.error("Could not write report %s: %s", report_path, e)


def exit_code_for(exc: BaseException) -> int:
    if isinstance(exc, CommandError):
        if exc.returncode < 0:
            # Killed by a signal.
            return 128 - exc.returncode
        return exc.returncode or 1
    return 1


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="workstation-bootstrap",
        description="Idempotently provision a Fedora workstation from list files.",
    )
    p.add_argument("--source-dir", default=None, help="Directory holding pkglist.txt, home/, ... (default: .)")
    p.add_argument("--config", default=None, help=f"YAML config (default: <source-dir>/{DEFAULT_CONFIG_NAME} if present)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the run log")
    p.add_argument("--report", default=None, help="Write a run report (json|yaml)")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_install_flatpaks)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--no-sudo", action="store_true", help="Never prefix commands with sudo")
    p.add_argument("--list-steps", action="store_true", help="Print the step ids and exit")

    args = p.parse_args(argv)

    if args.list_steps:
        for step in build_steps():
            print(f"{step.step_id}\t{step.title}")
        return 0

    try:
        run(
            source_dir=args.source_dir,
            config_path=args.config,
            log_path=args.log,
            report_path=args.report,
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=bool(args.dry_run),
            no_sudo=bool(args.no_sudo),
        )
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except Exception as e:
        return exit_code_for(e)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
