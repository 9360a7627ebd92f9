# Path and File Name : /opt/chef-installer/chef_installer/process.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Blocking external process invocation - surfaces non-zero exit status as a failure carrying process name and exit code

"""
Process Runner: Runs external collaborators (msiexec, sc.exe, knife).
Every call is blocking and runs to completion. Non-zero exit is fatal, never retried.
"""

import logging
import os
import subprocess
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class ProcessFailedError(RuntimeError):
    """Raised when an external process exits non-zero or cannot be started."""

    def __init__(self, name: str, exit_code: Optional[int], stderr: str = ""):
        self.name = name
        self.exit_code = exit_code
        self.stderr = stderr
        if exit_code is None:
            message = f"{name} could not be started"
        else:
            message = f"{name} failed with exit code {exit_code}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


def run_process(argv: List[str], env: Optional[Dict[str, str]] = None) -> subprocess.CompletedProcess:
    """
    Run a process to completion.

    Args:
        argv: Argument list, argv[0] is the executable
        env: Full environment for the child (None inherits the current one)

    Returns:
        CompletedProcess with text stdout/stderr

    Raises:
        ProcessFailedError: If the executable cannot be launched
    """
    logger.debug(f"Running: {' '.join(argv)}")
    try:
        return subprocess.run(argv, capture_output=True, text=True, env=env)
    except OSError as e:
        raise ProcessFailedError(os.path.basename(argv[0]), None, str(e)) from e


def check_process(argv: List[str], env: Optional[Dict[str, str]] = None) -> str:
    """Run a process and return its stdout, raising ProcessFailedError on non-zero exit."""
    result = run_process(argv, env=env)
    if result.returncode != 0:
        raise ProcessFailedError(os.path.basename(argv[0]), result.returncode, result.stderr or "")
    return result.stdout
