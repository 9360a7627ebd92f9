# Path and File Name : /opt/chef-installer/chef_installer/hints/azure_hints.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Exports Azure role-instance metadata as an Ohai hints file (azure.json) for the Chef plugin system

"""
Azure Hints Exporter: Writes <hints_dir>/azure.json.

Ohai cannot detect an Azure cloud service role instance on its own. The
hints file carries the deployment, role, fault/update domain and endpoint
layout so the azure plugin can populate node attributes.

The role-instance metadata source sometimes returns an incomplete object
on the first call after start-up, so it is queried twice and the first
result is discarded. This applies to this source only.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import jsonschema
import yaml

logger = logging.getLogger(__name__)

HINTS_FILE_NAME = "azure.json"
DEFAULT_HINTS_DIR = "C:\\chef\\ohai\\hints"

_ENDPOINT_SCHEMA = {
    "type": "object",
    "properties": {
        "ip_endpoint": {"type": "string"},
        "public_ip_endpoint": {"type": "string"},
        "protocol": {"type": "string"},
    },
    "required": ["ip_endpoint", "public_ip_endpoint", "protocol"],
    "additionalProperties": False,
}

HINTS_SCHEMA = {
    "type": "object",
    "definitions": {
        "endpoints": {
            "type": "object",
            "additionalProperties": _ENDPOINT_SCHEMA,
        },
    },
    "properties": {
        "deployment_id": {"type": "string"},
        "instance_id": {"type": "string"},
        "update_domain": {"type": "string"},
        "fault_domain": {"type": "string"},
        "role_name": {"type": "string"},
        "instance_endpoints": {"$ref": "#/definitions/endpoints"},
        "virtual_ip_groups": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "virtual_ips": {
                        "type": "object",
                        "additionalProperties": {
                            "type": "object",
                            "properties": {
                                "public_ip_address": {"type": "string"},
                                "instance_endpoints": {"$ref": "#/definitions/endpoints"},
                            },
                            "required": ["public_ip_address", "instance_endpoints"],
                        },
                    },
                },
                "required": ["name", "virtual_ips"],
            },
        },
    },
    "required": [
        "deployment_id", "instance_id", "update_domain", "fault_domain",
        "role_name", "instance_endpoints", "virtual_ip_groups",
    ],
}


@dataclass
class InstanceEndpoint:
    ip_endpoint: Any = None
    public_ip_endpoint: Any = None
    protocol: Any = None


@dataclass
class VirtualIP:
    public_ip_address: Any = None
    instance_endpoints: Dict[str, InstanceEndpoint] = field(default_factory=dict)


@dataclass
class VirtualIPGroup:
    name: Any = None
    virtual_ips: Dict[str, VirtualIP] = field(default_factory=dict)


@dataclass
class RoleInstance:
    """Snapshot of the current Azure role instance."""
    deployment_id: Any = None
    id: Any = None
    update_domain: Any = None
    fault_domain: Any = None
    role_name: Any = None
    instance_endpoints: Dict[str, InstanceEndpoint] = field(default_factory=dict)
    virtual_ip_groups: Dict[str, VirtualIPGroup] = field(default_factory=dict)


RoleInstanceProvider = Callable[[], RoleInstance]


def to_str(value: Any) -> str:
    """None renders as "", everything else (0 and False included) via str()."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _endpoints_to_dict(endpoints: Optional[Dict[str, InstanceEndpoint]]) -> Dict[str, Dict[str, str]]:
    return {
        to_str(name): {
            "ip_endpoint": to_str(endpoint.ip_endpoint),
            "public_ip_endpoint": to_str(endpoint.public_ip_endpoint),
            "protocol": to_str(endpoint.protocol),
        }
        for name, endpoint in (endpoints or {}).items()
    }


def build_hints(instance: RoleInstance) -> Dict[str, Any]:
    """Build the nested azure.json mapping for a role instance."""
    virtual_ip_groups = {}
    for group_name, group in (instance.virtual_ip_groups or {}).items():
        virtual_ips = {}
        for vip_name, vip in (group.virtual_ips or {}).items():
            virtual_ips[to_str(vip_name)] = {
                "public_ip_address": to_str(vip.public_ip_address),
                "instance_endpoints": _endpoints_to_dict(vip.instance_endpoints),
            }
        virtual_ip_groups[to_str(group_name)] = {
            "name": to_str(group.name),
            "virtual_ips": virtual_ips,
        }

    return {
        "deployment_id": to_str(instance.deployment_id),
        "instance_id": to_str(instance.id),
        "update_domain": to_str(instance.update_domain),
        "fault_domain": to_str(instance.fault_domain),
        "role_name": to_str(instance.role_name),
        "instance_endpoints": _endpoints_to_dict(instance.instance_endpoints),
        "virtual_ip_groups": virtual_ip_groups,
    }


def query_role_instance(provider: RoleInstanceProvider) -> RoleInstance:
    """Query the provider twice and keep the second answer."""
    provider()
    return provider()


def _endpoints_from_dict(data: Optional[Dict[str, Any]]) -> Dict[str, InstanceEndpoint]:
    return {
        name: InstanceEndpoint(
            ip_endpoint=(endpoint or {}).get("ip_endpoint"),
            public_ip_endpoint=(endpoint or {}).get("public_ip_endpoint"),
            protocol=(endpoint or {}).get("protocol"),
        )
        for name, endpoint in (data or {}).items()
    }


def load_role_instance(path: Union[str, Path]) -> RoleInstance:
    """
    Load a captured role-instance metadata document (YAML or JSON).

    Args:
        path: Metadata document

    Returns:
        RoleInstance

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the document is not a mapping
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Role instance metadata in {path} must be a mapping")

    groups = {}
    for group_name, group in (data.get("virtual_ip_groups") or {}).items():
        group = group or {}
        vips = {}
        for vip_name, vip in (group.get("virtual_ips") or {}).items():
            vip = vip or {}
            vips[vip_name] = VirtualIP(
                public_ip_address=vip.get("public_ip_address"),
                instance_endpoints=_endpoints_from_dict(vip.get("instance_endpoints")),
            )
        groups[group_name] = VirtualIPGroup(name=group.get("name"), virtual_ips=vips)

    return RoleInstance(
        deployment_id=data.get("deployment_id"),
        id=data.get("id"),
        update_domain=data.get("update_domain"),
        fault_domain=data.get("fault_domain"),
        role_name=data.get("role_name"),
        instance_endpoints=_endpoints_from_dict(data.get("instance_endpoints")),
        virtual_ip_groups=groups,
    )


def file_provider(path: Union[str, Path]) -> RoleInstanceProvider:
    """Provider that re-reads a captured metadata document on every call."""
    return lambda: load_role_instance(path)


def export_hints(output_dir: Optional[Union[str, Path]] = None,
                 provider: Optional[RoleInstanceProvider] = None) -> Path:
    """
    Write azure.json into output_dir.

    Args:
        output_dir: Hints directory, created when absent (default C:\\chef\\ohai\\hints)
        provider: Callable returning the current RoleInstance

    Returns:
        Path to the written hints file

    Raises:
        ValueError: If no provider is given
        jsonschema.ValidationError: If the built hints are malformed
    """
    if provider is None:
        raise ValueError("A role instance metadata provider is required")

    instance = query_role_instance(provider)
    hints = build_hints(instance)
    jsonschema.validate(instance=hints, schema=HINTS_SCHEMA)

    hints_dir = Path(output_dir or DEFAULT_HINTS_DIR)
    hints_dir.mkdir(parents=True, exist_ok=True)
    hints_path = hints_dir / HINTS_FILE_NAME

    with open(hints_path, 'w') as f:
        json.dump(hints, f, indent=2)

    logger.info(f"Wrote Azure hints to {hints_path}")
    return hints_path
