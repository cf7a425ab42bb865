import os
import sys

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cfadmission.modules.errors import ErrorType, ValidationError
from cfadmission.modules.resources import APP, DOMAIN, ORG, ORG_NAME_LABEL, SPACE_NAME_LABEL
from cfadmission.modules.validation import (
    AnchorValidator,
    AppValidator,
    DomainValidator,
    OrgValidator,
    RouteValidator,
    SecurityGroupValidator,
    ServiceBindingValidator,
    ServiceInstanceValidator,
    SpaceValidator,
    TaskValidator,
)

from fixtures.resources import (
    ROOT_NAMESPACE,
    make_anchor,
    make_app,
    make_binding,
    make_domain,
    make_org,
    make_route,
    make_security_group,
    make_service_instance,
    make_space,
    make_task,
)


async def assert_denied(coro, error_type, message=None):
    with pytest.raises(ValidationError) as exc_info:
        await coro
    assert exc_info.value.type == error_type.value, exc_info.value
    if message is not None:
        assert exc_info.value.message == message
    return exc_info.value


# Apps


@pytest.fixture
def app_validator(duplicates):
    return AppValidator(duplicates("app"))


@pytest.mark.asyncio
async def test_app_names_are_unique_ignoring_case(app_validator):
    await app_validator.validate_create(make_app("guid-1", "Foo"))

    await assert_denied(
        app_validator.validate_create(make_app("guid-2", "foo")),
        ErrorType.DUPLICATE_NAME,
        "App with the name 'foo' already exists.",
    )


@pytest.mark.asyncio
async def test_app_same_name_in_other_space(app_validator):
    await app_validator.validate_create(make_app("guid-1", "foo", "space-a"))
    await app_validator.validate_create(make_app("guid-2", "foo", "space-b"))


@pytest.mark.asyncio
async def test_app_requires_display_name(app_validator):
    await assert_denied(app_validator.validate_create(make_app("guid-1", "")), ErrorType.STRUCTURAL)


@pytest.mark.asyncio
async def test_app_lifecycle_type_is_immutable(app_validator):
    old = make_app("guid-1", "foo", lifecycle="buildpack")
    new = make_app("guid-1", "foo", lifecycle="docker")

    err = await assert_denied(app_validator.validate_update(old, new), ErrorType.IMMUTABLE_FIELD)
    assert "cannot be changed from buildpack to docker" in err.message


@pytest.mark.asyncio
async def test_app_rename_frees_old_name(app_validator):
    old = make_app("guid-1", "foo")
    await app_validator.validate_create(old)

    await app_validator.validate_update(old, make_app("guid-1", "bar"))

    await app_validator.validate_create(make_app("guid-2", "foo"))


@pytest.mark.asyncio
async def test_app_delete_frees_name(app_validator):
    app = make_app("guid-1", "foo")
    await app_validator.validate_create(app)

    await app_validator.validate_delete(app)

    await app_validator.validate_create(make_app("guid-2", "FOO"))


# Orgs


@pytest.fixture
def org_validator(duplicates):
    return OrgValidator(duplicates("org"), ROOT_NAMESPACE)


@pytest.mark.asyncio
async def test_org_must_live_in_root_namespace(org_validator):
    await assert_denied(
        org_validator.validate_create(make_org("org-guid", "acme", namespace="elsewhere")),
        ErrorType.PLACEMENT,
        "Organization 'acme' must be placed in the root 'cf' namespace",
    )


@pytest.mark.asyncio
async def test_org_name_length(org_validator):
    await assert_denied(
        org_validator.validate_create(make_org("o" * 64, "acme")),
        ErrorType.STRUCTURAL,
        "org name cannot be longer than 63 chars",
    )


@pytest.mark.asyncio
async def test_org_duplicate(org_validator):
    await org_validator.validate_create(make_org("org-1", "Acme"))

    await assert_denied(
        org_validator.validate_create(make_org("org-2", "ACME")),
        ErrorType.DUPLICATE_NAME,
        "Organization 'ACME' already exists.",
    )


@pytest.mark.asyncio
async def test_rejected_org_leaves_no_claim(org_validator):
    """Placement is checked before claiming, so the name stays free."""
    await assert_denied(
        org_validator.validate_create(make_org("org-1", "acme", namespace="elsewhere")),
        ErrorType.PLACEMENT,
    )

    await org_validator.validate_create(make_org("org-2", "acme"))


# Spaces


@pytest.fixture
def space_validator(duplicates, reader):
    reader.add(ORG, make_org("org-ns", "acme"))
    return SpaceValidator(duplicates("space"), reader, ROOT_NAMESPACE)


@pytest.mark.asyncio
async def test_space_requires_existing_org(space_validator):
    await space_validator.validate_create(make_space("space-1", "billing", "org-ns"))

    await assert_denied(
        space_validator.validate_create(make_space("space-2", "billing", "not-an-org")),
        ErrorType.PLACEMENT,
    )


@pytest.mark.asyncio
async def test_space_org_lookup_failure_is_unknown(space_validator, reader):
    reader.fail(ORG, ROOT_NAMESPACE, "org-ns")

    await assert_denied(
        space_validator.validate_create(make_space("space-1", "billing", "org-ns")),
        ErrorType.UNKNOWN,
    )


@pytest.mark.asyncio
async def test_space_duplicate_message(space_validator):
    await space_validator.validate_create(make_space("space-1", "billing", "org-ns"))

    await assert_denied(
        space_validator.validate_create(make_space("space-2", "Billing", "org-ns")),
        ErrorType.DUPLICATE_NAME,
        "Space 'Billing' already exists. Name must be unique per organization.",
    )


# Routes


@pytest.fixture
def route_validator(duplicates, reader):
    reader.add(DOMAIN, make_domain("domain-guid", "example.com"))
    reader.add(DOMAIN, make_domain("other-domain-guid", "example.org"))
    reader.add(APP, make_app("app-1", "my-app", "space-ns"))
    return RouteValidator(duplicates("route"), reader, ROOT_NAMESPACE)


@pytest.mark.asyncio
async def test_route_composite_key(route_validator):
    await route_validator.validate_create(make_route("r-1", "www", domain="domain-guid", path="/api"))
    await route_validator.validate_create(make_route("r-2", "www", domain="other-domain-guid", path="/api"))

    await assert_denied(
        route_validator.validate_create(make_route("r-3", "WWW", domain="domain-guid", path="/api")),
        ErrorType.DUPLICATE_NAME,
        "Route already exists with host 'WWW' and path '/api' for domain 'example.com'.",
    )


@pytest.mark.asyncio
async def test_route_same_host_different_path(route_validator):
    await route_validator.validate_create(make_route("r-1", "www", path="/a"))
    await route_validator.validate_create(make_route("r-2", "www", path="/b"))
    await route_validator.validate_create(make_route("r-3", "www"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "host, message",
    [
        ("", "host cannot be empty"),
        ("a" * 64, "host is too long (maximum is 63 characters)"),
        ("bad.host", 'host must be either "*" or contain only alphanumeric characters, "_", or "-"'),
        ("*.x", 'host must be either "*" or contain only alphanumeric characters, "_", or "-"'),
        ("café", 'host must be either "*" or contain only alphanumeric characters, "_", or "-"'),
        ("www\n", 'host must be either "*" or contain only alphanumeric characters, "_", or "-"'),
    ],
)
async def test_route_host_rules(route_validator, host, message):
    await assert_denied(
        route_validator.validate_create(make_route("r-1", host)), ErrorType.STRUCTURAL, message
    )


@pytest.mark.asyncio
async def test_route_host_errors_are_joined(route_validator):
    err = await assert_denied(
        route_validator.validate_create(make_route("r-1", "." * 64)), ErrorType.STRUCTURAL
    )

    assert err.message == (
        "host is too long (maximum is 63 characters), "
        'host must be either "*" or contain only alphanumeric characters, "_", or "-"'
    )


@pytest.mark.asyncio
async def test_route_wildcard_host_allowed(route_validator):
    await route_validator.validate_create(make_route("r-1", "*"))


@pytest.mark.asyncio
async def test_route_host_must_form_valid_fqdn(route_validator):
    await assert_denied(
        route_validator.validate_create(make_route("r-1", "1-leading-digit")),
        ErrorType.STRUCTURAL,
        "FQDN does not comply with RFC 1035 standards",
    )


@pytest.mark.asyncio
async def test_route_on_domain_with_trailing_newline(route_validator, reader):
    reader.add(DOMAIN, make_domain("newline-domain", "example.net\n"))

    await assert_denied(
        route_validator.validate_create(make_route("r-1", "www", domain="newline-domain")),
        ErrorType.STRUCTURAL,
        "FQDN does not comply with RFC 1035 standards",
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, message",
    [
        ("/", "Path cannot be a single slash"),
        ("/foo?bar", "Path cannot contain a question mark"),
        ("/" + "a" * 128, "Path cannot exceed 128 characters"),
        ("no-slash", "Invalid Route URI"),
    ],
)
async def test_route_path_rules(route_validator, path, message):
    await assert_denied(
        route_validator.validate_create(make_route("r-1", "www", path=path)),
        ErrorType.STRUCTURAL,
        message,
    )


@pytest.mark.asyncio
async def test_route_missing_domain(route_validator):
    await assert_denied(
        route_validator.validate_create(make_route("r-1", "www", domain="missing")),
        ErrorType.REFERENTIAL_MISSING,
    )


@pytest.mark.asyncio
async def test_route_domain_lookup_failure(route_validator, reader):
    reader.fail(DOMAIN, ROOT_NAMESPACE, "domain-guid")

    await assert_denied(
        route_validator.validate_create(make_route("r-1", "www")),
        ErrorType.UNKNOWN,
        "Error while retrieving CFDomain object",
    )


@pytest.mark.asyncio
async def test_route_destination_must_exist_in_space(route_validator):
    await route_validator.validate_create(make_route("r-1", "www", destinations=["app-1"]))

    await assert_denied(
        route_validator.validate_create(make_route("r-2", "api", destinations=["app-1", "ghost"])),
        ErrorType.REFERENTIAL_MISSING,
        "Route destination app not found in space",
    )


@pytest.mark.asyncio
async def test_route_destination_lookup_failure(route_validator, reader):
    reader.fail(APP, "space-ns", "app-1")

    await assert_denied(
        route_validator.validate_create(make_route("r-1", "www", destinations=["app-1"])),
        ErrorType.UNKNOWN,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes, field",
    [
        ({"host": "api"}, "CFRoute.Spec.Host"),
        ({"path": "/v2"}, "CFRoute.Spec.Path"),
        ({"protocol": "http2"}, "CFRoute.Spec.Protocol"),
        ({"domain": "other-domain-guid"}, "CFRoute.Spec.DomainRef.Name"),
    ],
)
async def test_route_immutable_fields(route_validator, changes, field):
    old_args = {"host": "www", "path": "/v1", "protocol": "http", "domain": "domain-guid"}
    old = make_route("r-1", **old_args)
    new = make_route("r-1", **{**old_args, **changes})

    await assert_denied(
        route_validator.validate_update(old, new),
        ErrorType.IMMUTABLE_FIELD,
        f"'{field}' field is immutable",
    )


@pytest.mark.asyncio
async def test_route_update_checks_destinations(route_validator):
    old = make_route("r-1", "www")
    await route_validator.validate_create(old)

    await route_validator.validate_update(old, make_route("r-1", "www", destinations=["app-1"]))
    await assert_denied(
        route_validator.validate_update(old, make_route("r-1", "www", destinations=["ghost"])),
        ErrorType.REFERENTIAL_MISSING,
    )


@pytest.mark.asyncio
async def test_route_update_skipped_while_deleting(route_validator):
    old = make_route("r-1", "www")
    new = make_route("r-1", "api", destinations=["ghost"], deleting=True)

    await route_validator.validate_update(old, new)


@pytest.mark.asyncio
async def test_route_delete_frees_key(route_validator):
    route = make_route("r-1", "www")
    await route_validator.validate_create(route)

    await route_validator.validate_delete(route)

    await route_validator.validate_create(make_route("r-2", "www"))


# Domains


@pytest.fixture
def domain_validator(reader):
    reader.add(DOMAIN, make_domain("existing", "example.com"))
    return DomainValidator(reader)


@pytest.mark.asyncio
async def test_domain_overlap_with_subdomain(domain_validator):
    await assert_denied(
        domain_validator.validate_create(make_domain("new", "foo.example.com")),
        ErrorType.DUPLICATE_NAME,
        "Overlapping domain exists",
    )


@pytest.mark.asyncio
async def test_domain_overlap_with_parent(domain_validator):
    await assert_denied(
        domain_validator.validate_create(make_domain("new", "com")),
        ErrorType.DUPLICATE_NAME,
    )


@pytest.mark.asyncio
async def test_domain_suffix_without_label_boundary(domain_validator):
    await domain_validator.validate_create(make_domain("new", "ample.com"))


@pytest.mark.asyncio
async def test_domain_ignores_itself(domain_validator):
    await domain_validator.validate_create(make_domain("existing", "example.com"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name", ["", "Example.com", "-bad.com", "bad..com", "a" * 64 + ".com", "example.org\n", "exämple.org"]
)
async def test_domain_name_must_be_dns_subdomain(domain_validator, name):
    await assert_denied(domain_validator.validate_create(make_domain("new", name)), ErrorType.STRUCTURAL)


@pytest.mark.asyncio
async def test_domain_with_trailing_newline_is_not_a_new_domain(domain_validator):
    await assert_denied(
        domain_validator.validate_create(make_domain("new", "example.com\n")), ErrorType.STRUCTURAL
    )


@pytest.mark.asyncio
async def test_domain_list_failure_is_unknown(domain_validator, reader):
    from cfadmission.modules.resources import ResourceLookupError

    reader.list_error = ResourceLookupError("forbidden")

    await assert_denied(
        domain_validator.validate_create(make_domain("new", "example.org")), ErrorType.UNKNOWN
    )


@pytest.mark.asyncio
async def test_domain_name_is_immutable(domain_validator):
    old = make_domain("existing", "example.com")

    await assert_denied(
        domain_validator.validate_update(old, make_domain("existing", "example.org")),
        ErrorType.IMMUTABLE_FIELD,
        "'CFDomain.Spec.Name' field is immutable",
    )
    await domain_validator.validate_update(old, make_domain("existing", "example.org", deleting=True))


# Service instances


@pytest.fixture
def instance_validator(duplicates):
    return ServiceInstanceValidator(duplicates("serviceinstance"))


@pytest.mark.asyncio
async def test_service_instance_names_are_case_sensitive(instance_validator):
    await instance_validator.validate_create(make_service_instance("si-1", "Foo"))
    await instance_validator.validate_create(make_service_instance("si-2", "foo"))

    await assert_denied(
        instance_validator.validate_create(make_service_instance("si-3", "foo")),
        ErrorType.DUPLICATE_NAME,
        "The service instance name is taken: foo",
    )


# Service bindings


@pytest.fixture
def binding_validator(duplicates):
    return ServiceBindingValidator(duplicates("servicebinding"))


@pytest.mark.asyncio
async def test_one_binding_per_app_and_instance(binding_validator):
    await binding_validator.validate_create(make_binding("b-1", "app-1", "si-1"))
    await binding_validator.validate_create(make_binding("b-2", "app-1", "si-2"))

    await assert_denied(
        binding_validator.validate_create(make_binding("b-3", "app-1", "si-1", display_name="other")),
        ErrorType.DUPLICATE_NAME,
        "Service binding already exists: App: app-1 Service Instance: si-1",
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes, field",
    [
        ({"app": "app-2"}, "AppRef.Name"),
        ({"instance": "si-2"}, "Service.Name"),
        ({"instance_namespace": "other-ns"}, "Service.Namespace"),
    ],
)
async def test_binding_references_are_immutable(binding_validator, changes, field):
    old_args = {"app": "app-1", "instance": "si-1"}
    old = make_binding("b-1", **old_args)
    new = make_binding("b-1", **{**old_args, **changes})

    await assert_denied(
        binding_validator.validate_update(old, new),
        ErrorType.IMMUTABLE_FIELD,
        f"'{field}' field is immutable",
    )


@pytest.mark.asyncio
async def test_binding_display_name_may_change(binding_validator):
    old = make_binding("b-1", "app-1", "si-1", display_name="one")
    await binding_validator.validate_create(old)

    await binding_validator.validate_update(old, make_binding("b-1", "app-1", "si-1", display_name="two"))


@pytest.mark.asyncio
async def test_binding_update_skipped_while_deleting(binding_validator):
    old = make_binding("b-1", "app-1", "si-1")
    new = make_binding("b-1", "app-2", "si-1", deleting=True)

    await binding_validator.validate_update(old, new)


# Anchors


@pytest.fixture
def anchor_validator(duplicates):
    return AnchorValidator(duplicates("org-anchor"), duplicates("space-anchor"))


@pytest.mark.asyncio
async def test_anchor_without_labels_is_ignored(anchor_validator):
    anchor = make_anchor("plain", "cf")

    await anchor_validator.validate_create(anchor)
    await anchor_validator.validate_create(anchor)
    await anchor_validator.validate_delete(anchor)


@pytest.mark.asyncio
async def test_anchor_with_both_labels_is_denied(anchor_validator):
    anchor = make_anchor("a", "cf", {ORG_NAME_LABEL: "acme", SPACE_NAME_LABEL: "billing"})

    await assert_denied(anchor_validator.validate_create(anchor), ErrorType.STRUCTURAL)


@pytest.mark.asyncio
async def test_org_anchor_duplicate(anchor_validator):
    await anchor_validator.validate_create(make_anchor("a-1", "cf", {ORG_NAME_LABEL: "Acme"}))

    await assert_denied(
        anchor_validator.validate_create(make_anchor("a-2", "cf", {ORG_NAME_LABEL: "acme"})),
        ErrorType.DUPLICATE_NAME,
        "Organization 'acme' already exists.",
    )


@pytest.mark.asyncio
async def test_org_and_space_anchors_do_not_collide(anchor_validator):
    await anchor_validator.validate_create(make_anchor("a-1", "cf", {ORG_NAME_LABEL: "shared"}))
    await anchor_validator.validate_create(make_anchor("a-2", "cf", {SPACE_NAME_LABEL: "shared"}))


@pytest.mark.asyncio
async def test_anchor_rename(anchor_validator):
    old = make_anchor("a-1", "org-ns", {SPACE_NAME_LABEL: "billing"})
    await anchor_validator.validate_create(old)

    await anchor_validator.validate_update(old, make_anchor("a-1", "org-ns", {SPACE_NAME_LABEL: "payments"}))

    await anchor_validator.validate_create(make_anchor("a-2", "org-ns", {SPACE_NAME_LABEL: "billing"}))


@pytest.mark.asyncio
async def test_anchor_update_from_unlabelled_is_allowed(anchor_validator):
    old = make_anchor("a-1", "cf")
    new = make_anchor("a-1", "cf", {ORG_NAME_LABEL: "acme"})

    await anchor_validator.validate_update(old, new)


@pytest.mark.asyncio
async def test_anchor_delete_frees_name(anchor_validator):
    anchor = make_anchor("a-1", "cf", {ORG_NAME_LABEL: "acme"})
    await anchor_validator.validate_create(anchor)

    await anchor_validator.validate_delete(anchor)

    await anchor_validator.validate_create(make_anchor("a-2", "cf", {ORG_NAME_LABEL: "acme"}))


# Security groups


@pytest.fixture
def security_group_validator(duplicates):
    return SecurityGroupValidator(duplicates("securitygroup"), ROOT_NAMESPACE)


def rule(protocol="tcp", ports="80", destination="192.168.1.1"):
    return {"protocol": protocol, "ports": ports, "destination": destination}


@pytest.mark.asyncio
async def test_security_group_names_are_unique(security_group_validator):
    await security_group_validator.validate_create(make_security_group("sg-1", "Public"))

    await assert_denied(
        security_group_validator.validate_create(make_security_group("sg-2", "public")),
        ErrorType.DUPLICATE_NAME,
        "Security group with name 'public' already exists.",
    )


@pytest.mark.asyncio
async def test_security_group_claims_in_root_namespace(security_group_validator):
    await security_group_validator.validate_create(make_security_group("sg-1", "public"))

    claim = await security_group_validator.duplicate_validator.registry.get_claim(ROOT_NAMESPACE, "public")
    assert claim.owner_name == "sg-1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "ports, protocol",
    [("80", "tcp"), ("80,443,8080", "tcp"), ("1000-2000", "udp"), ("", "all"), ("65535", "udp")],
)
async def test_security_group_valid_ports(security_group_validator, ports, protocol):
    await security_group_validator.validate_create(
        make_security_group("sg-1", "public", [rule(protocol=protocol, ports=ports)])
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("destination", ["10.0.0.1", "10.0.0.0/8", "192.168.1.20/24", "10.0.0.1-10.0.0.9"])
async def test_security_group_valid_destinations(security_group_validator, destination):
    await security_group_validator.validate_create(
        make_security_group("sg-1", "public", [rule(destination=destination)])
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes, message",
    [
        ({"protocol": "invalid"}, "protocol must be 'tcp', 'udp', or 'all'"),
        ({"protocol": "all"}, "ports are not allowed for protocols of type all"),
        ({"ports": ""}, "ports are required for protocols of type TCP and UDP"),
        ({"ports": "invalid"}, "ports must be a valid single port"),
        ({"ports": "67000"}, "ports must be a valid single port"),
        ({"ports": "0"}, "ports must be a valid single port"),
        ({"ports": "8080-invalid"}, "ports must be a valid single port"),
        ({"ports": "80-90,100"}, "ports must be a valid single port"),
        ({"destination": "invalid"}, "destination must contain valid CIDR(s)"),
        ({"destination": "192.168.1.20/50"}, "destination must contain valid CIDR(s)"),
        ({"destination": "10.0.0.0/0"}, "destination must contain valid CIDR(s)"),
        ({"destination": "192.168.1.20-invalid"}, "destination IP address range is invalid"),
    ],
)
async def test_security_group_invalid_rules(security_group_validator, changes, message):
    group = make_security_group("sg-1", "public", [rule(), rule(**changes)])

    err = await assert_denied(
        security_group_validator.validate_create(group), ErrorType.INVALID_SECURITY_GROUP_RULE
    )
    assert err.message.startswith("rules[1]: ")
    assert message in err.message


@pytest.mark.asyncio
async def test_rejected_security_group_leaves_no_claim(security_group_validator):
    await assert_denied(
        security_group_validator.validate_create(
            make_security_group("sg-1", "public", [rule(protocol="icmp")])
        ),
        ErrorType.INVALID_SECURITY_GROUP_RULE,
    )

    await security_group_validator.validate_create(make_security_group("sg-2", "public"))


@pytest.mark.asyncio
async def test_security_group_update_checks_rules(security_group_validator):
    old = make_security_group("sg-1", "public")
    await security_group_validator.validate_create(old)

    await assert_denied(
        security_group_validator.validate_update(
            old, make_security_group("sg-1", "public", [rule(destination="invalid")])
        ),
        ErrorType.INVALID_SECURITY_GROUP_RULE,
    )


@pytest.mark.asyncio
async def test_security_group_rename_and_delete(security_group_validator):
    old = make_security_group("sg-1", "public")
    await security_group_validator.validate_create(old)

    renamed = make_security_group("sg-1", "dns")
    await security_group_validator.validate_update(old, renamed)
    await security_group_validator.validate_create(make_security_group("sg-2", "public"))

    await security_group_validator.validate_delete(renamed)
    await security_group_validator.validate_create(make_security_group("sg-3", "dns"))


@pytest.mark.asyncio
async def test_security_group_update_skipped_while_deleting(security_group_validator):
    old = make_security_group("sg-1", "public")

    await security_group_validator.validate_update(
        old, make_security_group("sg-1", "public", [rule(protocol="invalid")], deleting=True)
    )


# Tasks


@pytest.fixture
def task_validator():
    return TaskValidator()


@pytest.mark.asyncio
async def test_task_create(task_validator):
    await task_validator.validate_create(make_task("task-1"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes, message",
    [
        ({"command": ""}, "missing required field 'Spec.Command'"),
        ({"app": ""}, "missing required field 'Spec.AppRef.Name'"),
        ({"sequence_id": -1}, "SequenceID cannot be negative"),
    ],
)
async def test_task_structure(task_validator, changes, message):
    await assert_denied(
        task_validator.validate_create(make_task("task-1", **changes)), ErrorType.STRUCTURAL, message
    )


@pytest.mark.asyncio
async def test_task_negative_sequence_id_on_update(task_validator):
    await assert_denied(
        task_validator.validate_update(make_task("task-1"), make_task("task-1", sequence_id=-1)),
        ErrorType.STRUCTURAL,
        "SequenceID cannot be negative",
    )


@pytest.mark.asyncio
async def test_task_sequence_id_is_immutable(task_validator):
    await assert_denied(
        task_validator.validate_update(make_task("task-1"), make_task("task-1", sequence_id=1)),
        ErrorType.IMMUTABLE_FIELD,
        "'CFTask.Status.SequenceID' field is immutable",
    )


@pytest.mark.asyncio
async def test_task_command_may_change(task_validator):
    await task_validator.validate_update(make_task("task-1"), make_task("task-1", command="echo ok"))


@pytest.mark.asyncio
async def test_task_cancel(task_validator):
    await task_validator.validate_update(make_task("task-1"), make_task("task-1", canceled=True))


@pytest.mark.asyncio
@pytest.mark.parametrize("condition, state", [("Succeeded", "SUCCEEDED"), ("Failed", "FAILED")])
async def test_finished_task_cannot_be_canceled(task_validator, condition, state):
    old = make_task("task-1", conditions=[condition])
    new = make_task("task-1", canceled=True, conditions=[condition])

    await assert_denied(
        task_validator.validate_update(old, new),
        ErrorType.CANCELATION_NOT_POSSIBLE,
        f"Task state is {state} and therefore cannot be canceled",
    )


@pytest.mark.asyncio
async def test_already_canceled_task_may_be_updated(task_validator):
    old = make_task("task-1", canceled=True, conditions=["Succeeded"])

    await task_validator.validate_update(
        old, make_task("task-1", command="echo foo", canceled=True, conditions=["Succeeded"])
    )


@pytest.mark.asyncio
async def test_task_delete_is_allowed(task_validator):
    await task_validator.validate_delete(make_task("task-1", command=""))
