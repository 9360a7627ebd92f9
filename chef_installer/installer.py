# Path and File Name : /opt/chef-installer/chef_installer/installer.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Installs the Chef Client MSI, configures the chef-client Windows service and computes the search path for later process calls

"""
Chef Client Installer: Main installation orchestrator.

Steps:
1. Run the Chef Client MSI silently with the client and service features
2. Set the service failure-recovery policy (restart on failure)
3. Point the service start command at the new install, config and log paths
4. Extend the search path with the install's bin directory

The search path is returned to the caller and passed explicitly to later
process invocations. os.environ is never modified.
"""

import logging
import ntpath
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .process import ProcessFailedError, run_process
from .settings import InstallerSettings

logger = logging.getLogger(__name__)

# sc.exe failure policy: reset counter after one day, restart after 60s twice
FAILURE_RESET_SECONDS = 86400
FAILURE_ACTIONS = "restart/60000/restart/60000/none/0"


def extend_search_path(search_path: Optional[str], directory: str, windows: Optional[bool] = None) -> str:
    """
    Append directory to an os.pathsep separated search path if not already present.

    Args:
        search_path: Existing PATH value (None or "" means empty)
        directory: Directory to add
        windows: Compare case-insensitively. Defaults to os.name == 'nt'.

    Returns:
        New search path string
    """
    if windows is None:
        windows = os.name == 'nt'

    entries = [entry for entry in (search_path or "").split(os.pathsep) if entry]
    normalize = (lambda p: p.rstrip('\\/').lower()) if windows else (lambda p: p.rstrip('/'))
    if normalize(directory) in {normalize(entry) for entry in entries}:
        return os.pathsep.join(entries)
    entries.append(directory)
    return os.pathsep.join(entries)


@dataclass
class InstallResult:
    """Outcome of a successful install."""
    install_dir: str
    bin_dir: str
    search_path: str

    def env(self, base: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Copy of base (default os.environ) with PATH set to the extended search path."""
        environment = dict(os.environ if base is None else base)
        environment["PATH"] = self.search_path
        return environment


class ChefClientInstaller:
    """Installs and wires up Chef Client on a Windows host."""

    def __init__(self, settings: Optional[InstallerSettings] = None,
                 runner: Callable[..., subprocess.CompletedProcess] = run_process):
        self.settings = settings or InstallerSettings()
        self.runner = runner

    @property
    def install_dir(self) -> str:
        return ntpath.join(self.settings.install_location, "chef")

    @property
    def bin_dir(self) -> str:
        return ntpath.join(self.install_dir, "bin")

    def build_msi_command(self, msi_path: str) -> List[str]:
        return [
            self.settings.msiexec,
            "/qn",
            "/i",
            str(msi_path),
            f"ADDLOCAL={','.join(self.settings.features)}",
            f"INSTALLLOCATION={self.settings.install_location}",
        ]

    def service_command(self) -> str:
        """Start command for the chef-client service."""
        ruby = ntpath.join(self.install_dir, "embedded", "bin", "ruby.exe")
        service_script = ntpath.join(self.bin_dir, "chef-windows-service")
        return (
            f'"{ruby}" "{service_script}" '
            f'-c "{self.settings.config_path}" -L "{self.settings.log_path}"'
        )

    def _run(self, argv: List[str]) -> None:
        result = self.runner(argv)
        if result.returncode != 0:
            raise ProcessFailedError(os.path.basename(argv[0]), result.returncode, getattr(result, 'stderr', '') or '')

    def configure_service(self) -> None:
        """
        Configure failure recovery and the start command of the service.

        Raises:
            ProcessFailedError: If sc.exe exits non-zero
        """
        service = self.settings.service_name
        logger.info(f"Configuring failure recovery for service {service}")
        self._run([
            self.settings.sc_exe, "failure", service,
            "reset=", str(FAILURE_RESET_SECONDS),
            "actions=", FAILURE_ACTIONS,
        ])

        logger.info(f"Rewriting start command of service {service}")
        self._run([
            self.settings.sc_exe, "config", service,
            "binPath=", self.service_command(),
        ])

    def install(self, msi_path: str, search_path: Optional[str] = None) -> InstallResult:
        """
        Install Chef Client from an MSI package.

        Args:
            msi_path: Chef Client MSI
            search_path: PATH to extend (defaults to the current PATH)

        Returns:
            InstallResult carrying the extended search path

        Raises:
            FileNotFoundError: If the MSI does not exist
            ProcessFailedError: If msiexec or sc.exe exits non-zero
        """
        if not Path(msi_path).exists():
            raise FileNotFoundError(f"Installer package not found: {msi_path}")

        logger.info(f"Installing {msi_path} to {self.settings.install_location}")
        self._run(self.build_msi_command(msi_path))

        self.configure_service()

        if search_path is None:
            search_path = os.environ.get("PATH", "")
        new_search_path = extend_search_path(search_path, self.bin_dir)

        logger.info(f"Chef Client installed to {self.install_dir}")
        return InstallResult(
            install_dir=self.install_dir,
            bin_dir=self.bin_dir,
            search_path=new_search_path,
        )
