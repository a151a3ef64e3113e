from .step_10_preconditions import PreconditionsStep
from .step_20_register_repos import RegisterReposStep
from .step_30_install_packages import InstallPackagesStep
from .step_35_modules_groups import EnableModulesStep, InstallGroupsStep
from .step_40_install_flatpaks import InstallFlatpaksStep
from .step_50_install_lang_packages import InstallNpmPackagesStep, InstallPipPackagesStep
from .step_60_apply_gsettings import ApplyGsettingsStep
from .step_70_stow_dotfiles import StowDotfilesStep

__all__ = [
    "PreconditionsStep",
    "RegisterReposStep",
    "InstallPackagesStep",
    "EnableModulesStep",
    "InstallGroupsStep",
    "InstallFlatpaksStep",
    "InstallPipPackagesStep",
    "InstallNpmPackagesStep",
    "ApplyGsettingsStep",
    "StowDotfilesStep",
]
