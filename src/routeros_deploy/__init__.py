"""Push RouterOS scripts to many devices over scp/ssh."""

from .inventory import HostsFileLoader, parse_host_spec
from .runner import DeploymentRunner

__all__ = ["DeploymentRunner", "HostsFileLoader", "parse_host_spec"]
