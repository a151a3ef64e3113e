from __future__ import annotations

from pathlib import Path

import pytest

from workstation_bootstrap.lib.flatpak import FLATHUB_URL
from workstation_bootstrap.lib.lists import ListFormatError
from workstation_bootstrap.lib.tools import MissingToolError
from workstation_bootstrap.main import build_steps
from workstation_bootstrap.steps import (
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


def test_nothing_applies_without_inputs(make_state) -> None:
    state = make_state()

    assert [s.step_id for s in build_steps() if s.applies(state)] == []


def test_packages_installed_in_one_invocation(source: Path, make_state, runner) -> None:
    (source / "pkglist.txt").write_text("git vim\nstow\n", encoding="utf-8")
    state = make_state()

    InstallPackagesStep().run(state)

    assert runner.calls == [["dnf", "install", "-y", "git", "vim", "stow"]]
    assert state["execution"]["applied"]["30_install_packages"]["packages"] == ["git", "vim", "stow"]


def test_packages_use_sudo_when_enabled(source: Path, make_state, runner) -> None:
    (source / "pkglist.txt").write_text("git\n", encoding="utf-8")

    InstallPackagesStep().run(make_state(sudo=True))

    assert runner.calls == [["sudo", "dnf", "install", "-y", "git"]]


def test_empty_package_list_issues_no_command(source: Path, make_state, runner) -> None:
    (source / "pkglist.txt").write_text("# later\n", encoding="utf-8")

    InstallPackagesStep().run(make_state())

    assert runner.calls == []


def test_modules_and_groups(source: Path, make_state, runner) -> None:
    (source / "modules.txt").write_text("nodejs:20\n", encoding="utf-8")
    (source / "groups.txt").write_text("development-tools c-development\n", encoding="utf-8")
    state = make_state()

    EnableModulesStep().run(state)
    InstallGroupsStep().run(state)

    assert runner.calls == [
        ["dnf", "module", "enable", "-y", "nodejs:20"],
        ["dnf", "group", "install", "-y", "development-tools", "c-development"],
    ]


def test_repo_files_copied_unless_identical(source: Path, tmp_path: Path, make_state, runner) -> None:
    repo_src = source / "repo-files"
    repo_src.mkdir()
    (repo_src / "vscode.repo").write_text("[code]\nname=VS Code\n", encoding="utf-8")
    (repo_src / "rpmfusion.repo").write_text("[rpmfusion]\n", encoding="utf-8")
    (repo_src / "README").write_text("not a repo\n", encoding="utf-8")

    dest = tmp_path / "yum.repos.d"
    dest.mkdir()
    (dest / "vscode.repo").write_text("[code]\nname=VS Code\n", encoding="utf-8")

    state = make_state()
    step = RegisterReposStep()
    assert step.applies(state)
    step.run(state)

    assert runner.calls == [["cp", "--", str(repo_src / "rpmfusion.repo"), str(dest)]]
    applied = state["execution"]["applied"]["20_register_repos"]
    assert applied == {"copied": ["rpmfusion.repo"], "unchanged": ["vscode.repo"]}


def test_repo_dir_without_repo_files_does_not_apply(source: Path, make_state) -> None:
    (source / "repo-files").mkdir()

    assert not RegisterReposStep().applies(make_state())


def test_installed_flatpak_gets_no_install_command(source: Path, make_state, runner) -> None:
    (source / "flatpak-apps.txt").write_text("org.mozilla.firefox\ncom.slack.Slack\n", encoding="utf-8")
    runner.returns("flatpak", "info", "org.mozilla.firefox", returncode=0)
    runner.returns("flatpak", "info", "com.slack.Slack", returncode=1)
    state = make_state()

    InstallFlatpaksStep().run(state)

    installs = [c for c in runner.commands("flatpak") if c[1] == "install"]
    assert installs == [["flatpak", "install", "-y", "--noninteractive", "flathub", "com.slack.Slack"]]
    assert ["flatpak", "remote-add", "--if-not-exists", "flathub", FLATHUB_URL] in runner.calls
    applied = state["execution"]["applied"]["40_install_flatpaks"]
    assert applied == {"installed": ["com.slack.Slack"], "already_installed": ["org.mozilla.firefox"]}


def test_flatpak_user_scope_and_no_remote(source: Path, make_state, runner) -> None:
    (source / "flatpak-apps.txt").write_text("org.gimp.GIMP\n", encoding="utf-8")
    runner.returns("flatpak", "info", returncode=1)

    InstallFlatpaksStep().run(make_state(flatpak={"user": True, "remote_url": None}))

    assert runner.calls == [
        ["flatpak", "info", "--user", "org.gimp.GIMP"],
        ["flatpak", "install", "--user", "-y", "--noninteractive", "flathub", "org.gimp.GIMP"],
    ]


def test_pip_requirements_passed_through(source: Path, make_state, runner) -> None:
    req = source / "pip3-packages.txt"
    req.write_text("black==24.1.0\nhttpie>=3\n", encoding="utf-8")

    InstallPipPackagesStep().run(make_state())

    assert runner.calls == [["pip3", "install", "--user", "-r", str(req)]]


def test_npm_only_manifest_keys_are_installed(source: Path, make_state, runner) -> None:
    (source / "npm-global.json").write_text('{"foo": "1.0.0"}', encoding="utf-8")

    InstallNpmPackagesStep().run(make_state())

    assert runner.calls == [["npm", "install", "-g", "foo"]]


def test_gsettings_applied_as_schema_key_value(source: Path, make_state, runner) -> None:
    (source / "gsettings.conf").write_text("org.gnome.desktop.interface clock-format 24h\n", encoding="utf-8")

    ApplyGsettingsStep().run(make_state())

    assert runner.calls == [["gsettings", "set", "org.gnome.desktop.interface", "clock-format", "24h"]]


def test_gsettings_parse_error_sets_nothing(source: Path, make_state, runner) -> None:
    (source / "gsettings.conf").write_text(
        "org.gnome.desktop.interface clock-format 24h\nbroken-line\n", encoding="utf-8"
    )

    with pytest.raises(ListFormatError):
        ApplyGsettingsStep().run(make_state())

    assert runner.calls == []


def test_dotfiles_restowed_into_target(source: Path, tmp_path: Path, make_state, runner) -> None:
    (source / "home" / ".config").mkdir(parents=True)

    StowDotfilesStep().run(make_state())

    assert runner.calls == [
        ["stow", "--restow", f"--dir={source}", f"--target={tmp_path / 'home-target'}", "home"]
    ]


def test_preconditions_only_check_tools_for_present_inputs(source: Path, make_state, runner, tools_on_path) -> None:
    (source / "npm-global.json").write_text("{}", encoding="utf-8")
    (source / "home").mkdir()
    tools_on_path["npm"] = False
    tools_on_path["flatpak"] = False

    def install(argv):
        if argv[:3] == ["dnf", "install", "-y"]:
            for pkg in argv[3:]:
                if pkg == "nodejs-npm":
                    tools_on_path["npm"] = True

    runner.on_call = install
    state = make_state()

    step = PreconditionsStep()
    assert step.applies(state)
    step.run(state)

    # flatpak is missing too, but nothing needs it.
    assert runner.calls == [["dnf", "install", "-y", "nodejs-npm"]]
    assert state["execution"]["applied"]["10_preconditions"] == {"installed": ["nodejs-npm"]}


def test_preconditions_fail_when_tool_still_missing(source: Path, make_state, runner, tools_on_path) -> None:
    (source / "gsettings.conf").write_text("a b c\n", encoding="utf-8")
    tools_on_path["gsettings"] = False

    with pytest.raises(MissingToolError):
        PreconditionsStep().run(make_state())

    assert runner.calls == [["dnf", "install", "-y", "glib2"]]


def test_dry_run_executes_nothing(source: Path, make_state, runner) -> None:
    (source / "pkglist.txt").write_text("git\n", encoding="utf-8")
    (source / "flatpak-apps.txt").write_text("org.gimp.GIMP\n", encoding="utf-8")
    state = make_state(dry_run=True)

    InstallPackagesStep().run(state)
    InstallFlatpaksStep().run(state)

    assert runner.calls == []
    assert state["execution"]["applied"]["40_install_flatpaks"]["installed"] == ["org.gimp.GIMP"]
