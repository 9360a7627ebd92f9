# Path and File Name : /opt/chef-installer/chef_installer/tests/installer_test.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Tests Chef Client installation orchestration - msiexec/sc.exe argv, failure propagation and search path handling

"""
Tests for the Chef Client installer.
msiexec and sc.exe are replaced by a recording runner.
"""

import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from chef_installer.installer import ChefClientInstaller, InstallResult, extend_search_path
from chef_installer.process import ProcessFailedError
from chef_installer.settings import InstallerSettings


class TestExtendSearchPath(unittest.TestCase):

    def test_appends_missing_directory(self):
        base = os.pathsep.join(["C:\\Windows", "C:\\Windows\\System32"])
        result = extend_search_path(base, "C:\\opscode\\chef\\bin", windows=True)
        self.assertEqual(result.split(os.pathsep)[-1], "C:\\opscode\\chef\\bin")

    def test_present_directory_not_duplicated(self):
        base = os.pathsep.join(["C:\\OPSCODE\\chef\\bin\\", "C:\\Windows"])
        result = extend_search_path(base, "C:\\opscode\\chef\\bin", windows=True)
        self.assertEqual(result, base)

    def test_empty_path(self):
        self.assertEqual(extend_search_path(None, "/opt/chef/bin", windows=False), "/opt/chef/bin")
        self.assertEqual(extend_search_path("", "/opt/chef/bin", windows=False), "/opt/chef/bin")

    def test_case_sensitive_off_windows(self):
        result = extend_search_path("/OPT/chef/bin", "/opt/chef/bin", windows=False)
        self.assertEqual(result.split(os.pathsep), ["/OPT/chef/bin", "/opt/chef/bin"])

    def test_install_result_env(self):
        result = InstallResult("C:\\opscode\\chef", "C:\\opscode\\chef\\bin", "C:\\opscode\\chef\\bin")
        env = result.env({"PATH": "x", "SYSTEMROOT": "C:\\Windows"})
        self.assertEqual(env, {"PATH": "C:\\opscode\\chef\\bin", "SYSTEMROOT": "C:\\Windows"})


class TestChefClientInstaller(unittest.TestCase):
    """Test installation orchestration."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp(prefix="installer_test_"))
        self.msi_path = self.temp_dir / "chef-client-18.2.7-1-x64.msi"
        self.msi_path.write_bytes(b"MSI")
        self.runner = MagicMock(return_value=MagicMock(returncode=0, stdout="", stderr=""))
        self.settings = InstallerSettings(
            install_location="D:\\opscode",
            config_path="D:\\chef\\client.rb",
            log_path="D:\\chef\\client.log",
        )

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_install_runs_msi_then_configures_service(self):
        installer = ChefClientInstaller(self.settings, runner=self.runner)

        result = installer.install(str(self.msi_path), search_path="C:\\Windows")

        calls = [c[0][0] for c in self.runner.call_args_list]
        self.assertEqual(len(calls), 3)
        self.assertEqual(calls[0], [
            "msiexec", "/qn", "/i", str(self.msi_path),
            "ADDLOCAL=ChefClientFeature,ChefServiceFeature",
            "INSTALLLOCATION=D:\\opscode",
        ])
        self.assertEqual(calls[1][:3], ["sc.exe", "failure", "chef-client"])
        self.assertIn("reset=", calls[1])
        self.assertIn("actions=", calls[1])
        self.assertEqual(calls[2][:4], ["sc.exe", "config", "chef-client", "binPath="])

        self.assertEqual(result.install_dir, "D:\\opscode\\chef")
        self.assertEqual(result.bin_dir, "D:\\opscode\\chef\\bin")
        self.assertTrue(result.search_path.endswith("D:\\opscode\\chef\\bin"))

    def test_service_command_references_paths(self):
        installer = ChefClientInstaller(self.settings, runner=self.runner)
        command = installer.service_command()

        self.assertIn("D:\\opscode\\chef\\embedded\\bin\\ruby.exe", command)
        self.assertIn('-c "D:\\chef\\client.rb"', command)
        self.assertIn('-L "D:\\chef\\client.log"', command)

    def test_missing_msi_fails_before_running(self):
        installer = ChefClientInstaller(self.settings, runner=self.runner)

        with self.assertRaises(FileNotFoundError):
            installer.install(str(self.temp_dir / "missing.msi"))

        self.runner.assert_not_called()

    def test_msi_failure_stops_installation(self):
        self.runner.return_value = MagicMock(returncode=1603, stdout="", stderr="")
        installer = ChefClientInstaller(self.settings, runner=self.runner)

        with self.assertRaises(ProcessFailedError) as context:
            installer.install(str(self.msi_path))

        self.assertEqual(context.exception.exit_code, 1603)
        self.assertEqual(context.exception.name, "msiexec")
        self.assertEqual(self.runner.call_count, 1)

    def test_service_configuration_failure(self):
        self.runner.side_effect = [
            MagicMock(returncode=0, stdout="", stderr=""),
            MagicMock(returncode=1060, stdout="", stderr="service does not exist"),
        ]
        installer = ChefClientInstaller(self.settings, runner=self.runner)

        with self.assertRaises(ProcessFailedError) as context:
            installer.install(str(self.msi_path))

        self.assertEqual(context.exception.name, "sc.exe")
        self.assertEqual(context.exception.exit_code, 1060)

    def test_failure_names_process_by_basename(self):
        self.settings.msiexec = "C:/Windows/System32/msiexec.exe"
        self.runner.return_value = MagicMock(returncode=1619, stdout="", stderr="")
        installer = ChefClientInstaller(self.settings, runner=self.runner)

        with self.assertRaises(ProcessFailedError) as context:
            installer.install(str(self.msi_path))

        self.assertEqual(context.exception.name, "msiexec.exe")

    def test_environment_is_not_modified(self):
        before = os.environ.get("PATH")
        installer = ChefClientInstaller(self.settings, runner=self.runner)

        installer.install(str(self.msi_path))

        self.assertEqual(os.environ.get("PATH"), before)


if __name__ == '__main__':
    unittest.main(verbosity=2)
