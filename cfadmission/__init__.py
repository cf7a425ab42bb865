"""
cfadmission - Cloud Foundry admission layer for Kubernetes

Admission webhooks that give CF resources the uniqueness rules Kubernetes
cannot express on its own: display names unique per scope, routes unique
per host, domain and path, one binding per app and service instance.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- errors: Denial vocabulary and its wire encoding
- registry: Claim stores (Redis, in-memory)
- coordination: Claim protocol and stuck-claim events
- keys: Uniqueness keys per resource kind
- resources: Resource models and Kubernetes lookups
- validation: Per-kind admission rules
- api: Admission and operator HTTP endpoints
- auth: Operator API keys
"""

__version__ = "1.0.0"
