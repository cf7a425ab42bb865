"""
Keys Module - Black Box Interface

Purpose: Canonical uniqueness keys per resource kind
Interface: key adapters exposing key_of() and duplicate_message(), domains_overlap()
Hidden: Case folding, composite key layout

Adapters are pure; the same resource always yields the same UniqueKey.
"""

from .domains import domains_overlap
from .keys import (
    KEY_SEPARATOR,
    AnchorKeys,
    AppKeys,
    KeyAdapter,
    OrgKeys,
    RouteKeys,
    SecurityGroupKeys,
    ServiceBindingKeys,
    ServiceInstanceKeys,
    SpaceKeys,
    UniqueKey,
    org_anchor_keys,
    route_key,
    service_binding_key,
    space_anchor_keys,
)

__all__ = [
    "KEY_SEPARATOR",
    "AnchorKeys",
    "AppKeys",
    "KeyAdapter",
    "OrgKeys",
    "RouteKeys",
    "SecurityGroupKeys",
    "ServiceBindingKeys",
    "ServiceInstanceKeys",
    "SpaceKeys",
    "UniqueKey",
    "domains_overlap",
    "org_anchor_keys",
    "route_key",
    "service_binding_key",
    "space_anchor_keys",
]
