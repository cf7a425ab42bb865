"""
Security group admission.

Security group names are unique across the installation. Each rule must name
a protocol the dataplane understands, ports matching that protocol, and an
IPv4 destination given as an address, a CIDR block or an address range.
"""

import ipaddress
import re

from cfadmission.modules.coordination import DuplicateValidator
from cfadmission.modules.errors import invalid_security_group_rule_error
from cfadmission.modules.keys import SecurityGroupKeys
from cfadmission.modules.resources import SECURITY_GROUP, CFSecurityGroup

from .base import NameClaimingValidator, require_display_name

PROTOCOL_TCP = "tcp"
PROTOCOL_UDP = "udp"
PROTOCOL_ALL = "all"
PROTOCOLS = (PROTOCOL_TCP, PROTOCOL_UDP, PROTOCOL_ALL)

MIN_PORT = 1
MAX_PORT = 65535
PORT_REGEX = re.compile(r"[0-9]+", re.ASCII)

INVALID_PROTOCOL_ERROR = "protocol must be 'tcp', 'udp', or 'all'"
PORTS_NOT_ALLOWED_ERROR = "ports are not allowed for protocols of type all"
INVALID_PORTS_ERROR = (
    "ports must be a valid single port, comma separated list of ports, "
    "or range or ports, formatted as a string"
)
PORTS_REQUIRED_ERROR = f"ports are required for protocols of type TCP and UDP, {INVALID_PORTS_ERROR}"
INVALID_DESTINATION_ERROR = (
    "destination must contain valid CIDR(s), IP address(es), or IP address range(s)"
)
INVALID_DESTINATION_RANGE_ERROR = "destination IP address range is invalid"


def _is_ipv4_address(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def _is_ipv4_cidr(value: str) -> bool:
    if "/" not in value:
        return False
    try:
        network = ipaddress.IPv4Network(value, strict=False)
    except ValueError:
        return False
    return network.prefixlen >= 1


def _is_valid_port(value: str) -> bool:
    return bool(PORT_REGEX.fullmatch(value)) and MIN_PORT <= int(value) <= MAX_PORT


def validate_rule_destination(destination: str) -> None:
    """
    Accept a single address, a CIDR block with a /1../32 prefix, or a
    "first-last" address range.

    Raises:
        ValueError: With the user-facing reason
    """
    if _is_ipv4_address(destination) or _is_ipv4_cidr(destination):
        return

    parts = destination.split("-")
    if len(parts) == 2:
        if not (_is_ipv4_address(parts[0]) and _is_ipv4_address(parts[1])):
            raise ValueError(INVALID_DESTINATION_RANGE_ERROR)
        return

    raise ValueError(INVALID_DESTINATION_ERROR)


def validate_rule_ports(ports: str, protocol: str) -> None:
    """
    Check ports against the protocol.

    "all" takes no ports; tcp and udp take one port, a comma separated list,
    or a single "low-high" range.

    Raises:
        ValueError: With the user-facing reason
    """
    if protocol not in PROTOCOLS:
        raise ValueError(INVALID_PROTOCOL_ERROR)

    if protocol == PROTOCOL_ALL:
        if ports:
            raise ValueError(PORTS_NOT_ALLOWED_ERROR)
        return

    if not ports:
        raise ValueError(PORTS_REQUIRED_ERROR)

    port_range = ports.split("-")
    port_values = ports.split(",")
    if len(port_range) > 1 and len(port_values) > 1:
        raise ValueError(INVALID_PORTS_ERROR)

    if len(port_range) == 2 and all(_is_valid_port(port) for port in port_range):
        return

    if not all(_is_valid_port(port) for port in port_values):
        raise ValueError(INVALID_PORTS_ERROR)


class SecurityGroupValidator(NameClaimingValidator):
    kind = SECURITY_GROUP
    skip_updates_while_deleting = True

    def __init__(self, duplicate_validator: DuplicateValidator, root_namespace: str):
        super().__init__(SecurityGroupKeys(root_namespace), duplicate_validator)

    def check_structure(self, security_group: CFSecurityGroup) -> None:
        require_display_name(security_group.spec.display_name, "Security group")
        self.check_rules(security_group)

    def check_rules(self, security_group: CFSecurityGroup) -> None:
        """Report the first broken rule by its index."""
        for index, rule in enumerate(security_group.spec.rules):
            try:
                validate_rule_destination(rule.destination)
                validate_rule_ports(rule.ports, rule.protocol)
            except ValueError as e:
                raise invalid_security_group_rule_error(f"rules[{index}]: {e}") from e
