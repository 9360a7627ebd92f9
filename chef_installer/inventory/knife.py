# Path and File Name : /opt/chef-installer/chef_installer/inventory/knife.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Lists Chef Server nodes through the knife CLI - passes in-memory configs via an ephemeral file that is always removed

"""
Knife Inventory: Runs `knife node list [-c <config>]`.

An in-memory ConfigDocument is written to a process-unique temporary file
for the duration of the call, since knife only accepts a config path.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from ..config.client_config import ConfigDocument, SaveMode, save_config
from ..process import check_process

logger = logging.getLogger(__name__)

DEFAULT_KNIFE = "knife"


def build_node_list_command(knife: str, config_path: Optional[str] = None) -> list:
    argv = [knife, "node", "list"]
    if config_path:
        argv.extend(["-c", str(config_path)])
    return argv


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        logger.debug(f"Could not remove temporary config {path}: {e}")


def list_nodes(config: Optional[Union[ConfigDocument, str, Path]] = None,
               knife: Optional[str] = None,
               env: Optional[Dict[str, str]] = None) -> str:
    """
    List the nodes registered on the Chef Server.

    Args:
        config: ConfigDocument (written to a temporary file), path to an
                existing knife/client config, or None for knife's default
        knife: knife executable (default "knife")
        env: Process environment, e.g. InstallResult.env()

    Returns:
        knife stdout, unmodified

    Raises:
        FileNotFoundError: If config is a path that does not exist
        ProcessFailedError: If knife exits non-zero
    """
    knife = knife or DEFAULT_KNIFE

    if config is None:
        return check_process(build_node_list_command(knife), env=env)

    if isinstance(config, ConfigDocument):
        fd, temp_path = tempfile.mkstemp(prefix=f"knife_{os.getpid()}_", suffix=".rb")
        os.close(fd)
        try:
            save_config(config, temp_path, SaveMode.OVERWRITE)
            return check_process(build_node_list_command(knife, temp_path), env=env)
        finally:
            _remove_quietly(temp_path)

    config_path = Path(config)
    if not config_path.exists():
        raise FileNotFoundError(f"Knife config not found: {config_path}")
    return check_process(build_node_list_command(knife, str(config_path)), env=env)
