# Path and File Name : /opt/chef-installer/chef_installer/hints/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Ohai hints package initialization

"""
Hints Package: Cloud metadata hints for the Ohai plugin system.
"""

from .azure_hints import (
    InstanceEndpoint,
    RoleInstance,
    VirtualIP,
    VirtualIPGroup,
    build_hints,
    export_hints,
    file_provider,
    to_str,
)

__all__ = [
    'InstanceEndpoint',
    'RoleInstance',
    'VirtualIP',
    'VirtualIPGroup',
    'build_hints',
    'export_hints',
    'file_provider',
    'to_str',
]
