"""
Validation Module - Black Box Interface

Purpose: Per-kind admission rules for the CF custom resources
Interface: ResourceValidator with validate_create/validate_update/validate_delete
Hidden: Check ordering, key derivation, reference lookups

Every validator returns None to admit and raises ValidationError to deny.
"""

from .anchors import AnchorValidator
from .apps import AppValidator
from .base import NameClaimingValidator, ResourceValidator
from .domains import DomainValidator, validate_domain_name
from .orgs import OrgValidator, SpaceValidator
from .routes import RouteValidator, validate_fqdn, validate_host, validate_path
from .security_groups import SecurityGroupValidator, validate_rule_destination, validate_rule_ports
from .services import ServiceBindingValidator, ServiceInstanceValidator
from .tasks import TaskValidator

__all__ = [
    "AnchorValidator",
    "AppValidator",
    "DomainValidator",
    "NameClaimingValidator",
    "OrgValidator",
    "ResourceValidator",
    "RouteValidator",
    "SecurityGroupValidator",
    "ServiceBindingValidator",
    "ServiceInstanceValidator",
    "SpaceValidator",
    "TaskValidator",
    "validate_domain_name",
    "validate_fqdn",
    "validate_host",
    "validate_path",
    "validate_rule_destination",
    "validate_rule_ports",
]
