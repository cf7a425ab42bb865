"""Domain admission: no two domains may overlap on label boundaries."""

import logging
import re

from cfadmission.modules.errors import (
    duplicate_name_error,
    immutable_field_error,
    structural_error,
    unknown_error,
)
from cfadmission.modules.keys import domains_overlap
from cfadmission.modules.resources import DOMAIN, CFDomain, ResourceLookupError, ResourceReader

from .base import ResourceValidator

logger = logging.getLogger(__name__)

DNS_LABEL_REGEX = re.compile(r"[a-z0-9]([-a-z0-9]*[a-z0-9])?", re.ASCII)
MAX_DNS_LABEL_LENGTH = 63
MAX_DNS_SUBDOMAIN_LENGTH = 253

OVERLAPPING_DOMAIN_ERROR = "Overlapping domain exists"


def validate_domain_name(name: str) -> None:
    """Reject names that are not DNS-1123 subdomains."""
    message = (
        f"Domain '{name}' is not a valid DNS-1123 subdomain: it must consist of lower case "
        "alphanumeric characters, '-' or '.', and start and end with an alphanumeric character"
    )
    if not name or len(name) > MAX_DNS_SUBDOMAIN_LENGTH:
        raise structural_error(message)

    for label in name.split("."):
        if len(label) > MAX_DNS_LABEL_LENGTH or not DNS_LABEL_REGEX.fullmatch(label):
            raise structural_error(message)


class DomainValidator(ResourceValidator):
    kind = DOMAIN

    def __init__(self, reader: ResourceReader):
        self.reader = reader

    async def validate_create(self, domain: CFDomain) -> None:
        validate_domain_name(domain.spec.name)

        try:
            existing_domains = await self.reader.list(DOMAIN)
        except ResourceLookupError as e:
            logger.error(f"Failed to list domains: {e}")
            raise unknown_error() from e

        for existing in existing_domains:
            if existing.namespace == domain.namespace and existing.name == domain.name:
                continue
            if domains_overlap(existing.spec.name.lower(), domain.spec.name.lower()):
                logger.info(
                    f"Domain {domain.spec.name!r} overlaps existing domain {existing.spec.name!r}"
                )
                raise duplicate_name_error(OVERLAPPING_DOMAIN_ERROR)

    async def validate_update(self, old_domain: CFDomain, domain: CFDomain) -> None:
        if domain.being_deleted:
            return

        if old_domain.spec.name != domain.spec.name:
            raise immutable_field_error("CFDomain.Spec.Name")
