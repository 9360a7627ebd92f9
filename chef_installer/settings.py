# Path and File Name : /opt/chef-installer/chef_installer/settings.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Loads installer settings from an optional YAML file with schema validation and defaults

"""
Installer Settings: Where Chef Client is installed and how it is wired up.

Settings come from a YAML file named by --settings or the
CHEF_INSTALLER_SETTINGS environment variable. Missing file means defaults.
"""

import logging
import os
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import jsonschema
import yaml

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "CHEF_INSTALLER_SETTINGS"

SETTINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "install_location": {"type": "string", "minLength": 1},
        "service_name": {"type": "string", "minLength": 1},
        "config_path": {"type": "string", "minLength": 1},
        "log_path": {"type": "string", "minLength": 1},
        "hints_dir": {"type": "string", "minLength": 1},
        "knife_path": {"type": "string", "minLength": 1},
        "msiexec": {"type": "string", "minLength": 1},
        "sc_exe": {"type": "string", "minLength": 1},
        "features": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
            "minItems": 1,
        },
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        },
    },
    "additionalProperties": False,
}


class SettingsError(Exception):
    """Raised when the settings file is malformed."""
    pass


@dataclass
class InstallerSettings:
    """Installer settings with Windows defaults for the Chef Client MSI."""
    install_location: str = "C:\\opscode"
    service_name: str = "chef-client"
    config_path: str = "C:\\chef\\client.rb"
    log_path: str = "C:\\chef\\client.log"
    hints_dir: str = "C:\\chef\\ohai\\hints"
    knife_path: str = "knife"
    msiexec: str = "msiexec"
    sc_exe: str = "sc.exe"
    features: List[str] = field(default_factory=lambda: ["ChefClientFeature", "ChefServiceFeature"])
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_settings(path: Optional[Union[str, Path]] = None) -> InstallerSettings:
    """
    Load installer settings.

    Args:
        path: YAML settings file. Falls back to $CHEF_INSTALLER_SETTINGS.

    Returns:
        InstallerSettings (defaults for anything not set)

    Raises:
        SettingsError: If the file is not a mapping or fails validation
    """
    if path is None:
        path = os.environ.get(SETTINGS_ENV_VAR)
    if not path:
        return InstallerSettings()

    settings_path = Path(path)
    if not settings_path.exists():
        logger.debug(f"Settings file {settings_path} not found, using defaults")
        return InstallerSettings()

    try:
        with open(settings_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Failed to parse settings file {settings_path}: {e}")

    if data is None:
        return InstallerSettings()
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {settings_path} must contain a mapping")

    try:
        jsonschema.validate(instance=data, schema=SETTINGS_SCHEMA)
    except jsonschema.ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e.message}")

    known = {f.name for f in fields(InstallerSettings)}
    return InstallerSettings(**{k: v for k, v in data.items() if k in known})
