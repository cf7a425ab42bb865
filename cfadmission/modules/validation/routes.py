"""
Route admission.

A route is unique by host, domain reference and path. Host and path rules
follow what the router can actually serve; the fully-qualified name has to
be a usable DNS name once the domain is known.
"""

import logging
import re
from typing import List
from urllib.parse import urlsplit

from cfadmission.modules.coordination import DuplicateValidator
from cfadmission.modules.errors import (
    immutable_field_error,
    referential_missing_error,
    structural_error,
    unknown_error,
)
from cfadmission.modules.keys import RouteKeys
from cfadmission.modules.resources import (
    APP,
    DOMAIN,
    ROUTE,
    CFDomain,
    CFRoute,
    ResourceLookupError,
    ResourceNotFoundError,
    ResourceReader,
)

from .base import NameClaimingValidator

logger = logging.getLogger(__name__)

# Applied with fullmatch, ASCII only: no trailing newline, no non-ASCII letters
HOST_REGEX = re.compile(r"([\w\-]+|\*)?", re.ASCII)
SUBDOMAIN_REGEX = re.compile(r"([^\.]{0,63}\.)*[^\.]{0,63}")
DOMAIN_REGEX = re.compile(
    r"[a-zA-Z]([a-zA-Z0-9-]*[a-zA-Z0-9])?(\.[a-zA-Z]([a-zA-Z0-9-]*[a-zA-Z0-9])?)*", re.ASCII
)

MAX_HOST_LENGTH = 63
MIN_FQDN_LENGTH = 3
MAX_FQDN_LENGTH = 253
MAX_PATH_LENGTH = 128

HOST_EMPTY_ERROR = "host cannot be empty"
HOST_LENGTH_ERROR = f"host is too long (maximum is {MAX_HOST_LENGTH} characters)"
HOST_FORMAT_ERROR = 'host must be either "*" or contain only alphanumeric characters, "_", or "-"'
SUBDOMAIN_LENGTH_ERROR = "Subdomains must each be at most 63 characters"
FQDN_FORMAT_ERROR = "FQDN does not comply with RFC 1035 standards"
FQDN_LENGTH_ERROR = f"FQDN must be between {MIN_FQDN_LENGTH} and {MAX_FQDN_LENGTH} characters"
INVALID_URI_ERROR = "Invalid Route URI"
PATH_IS_SLASH_ERROR = "Path cannot be a single slash"
PATH_HAS_QUESTION_MARK_ERROR = "Path cannot contain a question mark"
PATH_LENGTH_EXCEEDED_ERROR = f"Path cannot exceed {MAX_PATH_LENGTH} characters"
DESTINATION_NOT_IN_SPACE_ERROR = "Route destination app not found in space"
DOMAIN_LOOKUP_ERROR = "Error while retrieving CFDomain object"


def validate_host(host: str) -> None:
    errors: List[str] = []
    if not host:
        errors.append(HOST_EMPTY_ERROR)
    if len(host) > MAX_HOST_LENGTH:
        errors.append(HOST_LENGTH_ERROR)
    if not HOST_REGEX.fullmatch(host):
        errors.append(HOST_FORMAT_ERROR)

    if errors:
        raise structural_error(", ".join(errors))


def validate_fqdn(host: str, domain_name: str) -> None:
    """Check host.domain as a DNS name; a wildcard host leaves only the domain to check."""
    fqdn = f"{host}.{domain_name}"
    if not SUBDOMAIN_REGEX.fullmatch(fqdn):
        raise structural_error(SUBDOMAIN_LENGTH_ERROR)

    if not MIN_FQDN_LENGTH <= len(fqdn) <= MAX_FQDN_LENGTH:
        raise structural_error(FQDN_LENGTH_ERROR)

    checked = domain_name if host == "*" else fqdn
    if not DOMAIN_REGEX.fullmatch(checked):
        raise structural_error(FQDN_FORMAT_ERROR)


def _is_request_uri(path: str) -> bool:
    if not path.startswith("/"):
        return False
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in path):
        return False
    try:
        urlsplit(path)
    except ValueError:
        return False
    return True


def validate_path(path: str) -> None:
    if not path:
        return

    errors: List[str] = []
    if not _is_request_uri(path):
        errors.append(INVALID_URI_ERROR)
    if path == "/":
        errors.append(PATH_IS_SLASH_ERROR)
    if "?" in path:
        errors.append(PATH_HAS_QUESTION_MARK_ERROR)
    if len(path) > MAX_PATH_LENGTH:
        errors.append(PATH_LENGTH_EXCEEDED_ERROR)

    if errors:
        raise structural_error(", ".join(errors))


class RouteValidator(NameClaimingValidator):
    kind = ROUTE
    skip_updates_while_deleting = True

    def __init__(self, duplicate_validator: DuplicateValidator, reader: ResourceReader, root_namespace: str):
        super().__init__(RouteKeys(root_namespace), duplicate_validator)
        self.reader = reader

    async def validate_create(self, route: CFRoute) -> None:
        self.check_structure(route)

        domain = await self.fetch_domain(route)
        validate_fqdn(route.spec.host, domain.spec.name)
        await self.check_destinations(route)

        key = self.keys.key_of(route)
        await self.duplicate_validator.validate_create(
            key.namespace,
            key.key,
            self.keys.duplicate_message(route, domain.spec.name),
            owner_namespace=route.namespace,
            owner_name=route.name,
        )

    def check_structure(self, route: CFRoute) -> None:
        validate_host(route.spec.host)
        validate_path(route.spec.path)

    def check_immutable_fields(self, old_route: CFRoute, route: CFRoute) -> None:
        fields = [
            ("CFRoute.Spec.Host", old_route.spec.host, route.spec.host),
            ("CFRoute.Spec.Path", old_route.spec.path, route.spec.path),
            ("CFRoute.Spec.Protocol", old_route.spec.protocol, route.spec.protocol),
            ("CFRoute.Spec.DomainRef.Name", old_route.spec.domain_ref.name, route.spec.domain_ref.name),
            (
                "CFRoute.Spec.DomainRef.Namespace",
                old_route.spec.domain_ref.namespace,
                route.spec.domain_ref.namespace,
            ),
        ]
        for field_path, old_value, new_value in fields:
            if old_value != new_value:
                raise immutable_field_error(field_path)

    async def check_update_references(self, old_route: CFRoute, route: CFRoute) -> None:
        await self.check_destinations(route)

    async def fetch_domain(self, route: CFRoute) -> CFDomain:
        domain_ref = route.spec.domain_ref
        try:
            return await self.reader.get(DOMAIN, domain_ref.namespace, domain_ref.name)
        except ResourceNotFoundError:
            logger.info(f"Route {route.namespace}/{route.name} references missing domain {domain_ref.name}")
            raise referential_missing_error(
                f"Domain '{domain_ref.namespace}/{domain_ref.name}' not found"
            )
        except ResourceLookupError as e:
            logger.error(f"{DOMAIN_LOOKUP_ERROR}: {e}")
            raise unknown_error(DOMAIN_LOOKUP_ERROR) from e

    async def check_destinations(self, route: CFRoute) -> None:
        for destination in route.spec.destinations:
            app_name = destination.app_ref.name
            try:
                await self.reader.get(APP, route.namespace, app_name)
            except ResourceNotFoundError:
                logger.info(f"Route destination app {app_name} not found in {route.namespace}")
                raise referential_missing_error(DESTINATION_NOT_IN_SPACE_ERROR)
            except ResourceLookupError as e:
                logger.error(f"Failed to look up route destination app {app_name}: {e}")
                raise unknown_error() from e
