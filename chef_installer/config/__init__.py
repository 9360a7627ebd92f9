# Path and File Name : /opt/chef-installer/chef_installer/config/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Client configuration package initialization

"""
Client Configuration Package: client.rb round-trip engine.
"""

from .client_config import (
    ConfigDocument,
    ConfigExistsError,
    DEFAULT_FIELDS,
    KNOWN_FIELDS,
    SaveMode,
    load_config,
    save_config,
)

__all__ = [
    'ConfigDocument',
    'ConfigExistsError',
    'DEFAULT_FIELDS',
    'KNOWN_FIELDS',
    'SaveMode',
    'load_config',
    'save_config',
]
