# Path and File Name : /opt/chef-installer/chef_installer/inventory/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Inventory package initialization

"""
Inventory Package: Chef Server node queries through knife.
"""

from .knife import list_nodes

__all__ = ['list_nodes']
