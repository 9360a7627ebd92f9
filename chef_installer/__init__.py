# Path and File Name : /opt/chef-installer/chef_installer/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Package initialization for the Chef Client installer

"""
Chef Installer Package

Installs Chef Client, manages client.rb, queries nodes through knife and
exports Azure hints for Ohai.
"""

__version__ = "1.0.0"
