import pytest

from reviewapps.errors import ReviewAppError, UnsafeAppName
from reviewapps.models import EventAction, EventContext
from reviewapps.services.resolver import (
    InputResolver,
    coerce_bool,
    first_set,
    normalize_ha_flag,
    split_key_values,
)


def _event(number=42, owner=None, name=None):
    return EventContext(
        action=EventAction.OPENED,
        pr_number=number,
        repository_owner=owner,
        repository_name=name,
        raw_action="opened",
    )


def test_default_name_uses_github_repository():
    resolver = InputResolver({}, environ={"GITHUB_REPOSITORY": "acme/widgets"})

    identity = resolver.resolve_identity(_event())

    assert identity.name == "pr-42-acme-widgets"


def test_default_name_falls_back_to_event_repository():
    resolver = InputResolver({}, environ={})

    identity = resolver.resolve_identity(_event(owner="acme", name="widgets"))

    assert identity.name == "pr-42-acme-widgets"


def test_default_name_normalizes_underscores():
    resolver = InputResolver({}, environ={"GITHUB_REPOSITORY": "my_org/my_repo"})

    assert resolver.resolve_identity(_event()).name == "pr-42-my-org-my-repo"


@pytest.mark.parametrize(
    "explicit, expected",
    [
        ("myapp-pr-42", "myapp-pr-42"),
        ("my_app_42", "my-app-42"),
        ("420-service", "420-service"),
    ],
)
def test_explicit_name_containing_pr_number_is_kept(explicit, expected):
    resolver = InputResolver({"name": explicit}, environ={})

    assert resolver.resolve_identity(_event()).name == expected


def test_explicit_name_without_pr_number_is_unsafe():
    resolver = InputResolver({"name": "myapp"}, environ={})

    with pytest.raises(UnsafeAppName, match="must contain the PR number 42"):
        resolver.resolve_identity(_event())


def test_region_and_org_fallback_order():
    explicit = InputResolver({"region": "ams", "org": "acme"}, environ={"FLY_REGION": "fra", "FLY_ORG": "corp"})
    platform = InputResolver({}, environ={"FLY_REGION": "fra", "FLY_ORG": "corp"})
    hardcoded = InputResolver({"region": ""}, environ={})

    assert (explicit.resolve_identity(_event()).region, explicit.resolve_identity(_event()).org) == ("ams", "acme")
    assert (platform.resolve_identity(_event()).region, platform.resolve_identity(_event()).org) == ("fra", "corp")
    assert (hardcoded.resolve_identity(_event()).region, hardcoded.resolve_identity(_event()).org) == (
        "ord",
        "personal",
    )


def test_resolve_request_defaults():
    request = InputResolver({}, environ={}).resolve_request()

    assert request.config_path == "fly.toml"
    assert request.build_args == ()
    assert request.ha_flag == "--ha=false"
    assert request.detach is True
    assert request.image_ref is None
    assert request.vm_size is None
    assert request.vm_profile.is_empty()


def test_resolve_request_collects_options():
    request = InputResolver(
        {
            "dockerfile": "Dockerfile.review",
            "build_args": "A=1\nB=2 C=3",
            "ha": "true",
            "wait": "true",
            "cpukind": "shared",
            "cpus": "2",
            "memory": "1024",
        },
        environ={},
    ).resolve_request()

    assert request.dockerfile_ref == "Dockerfile.review"
    assert request.build_args == ("A=1", "B=2", "C=3")
    assert request.ha_enabled is True
    assert request.detach is False
    assert request.vm_profile.cpu_kind == "shared"
    assert request.vm_profile.cpu_count == "2"
    assert request.vm_profile.memory == "1024"


def test_image_and_dockerfile_are_mutually_exclusive():
    resolver = InputResolver({"image": "registry/app:1", "dockerfile": "Dockerfile"}, environ={})

    with pytest.raises(ReviewAppError, match="Both an image and a Dockerfile"):
        resolver.resolve_request()


def test_vm_label_and_explicit_profile_are_mutually_exclusive():
    resolver = InputResolver({"vm": "shared-cpu-1x", "memory": "512"}, environ={})

    with pytest.raises(ReviewAppError, match="VM size label"):
        resolver.resolve_request()


def test_resolve_checks_working_directory(tmp_path):
    resolver = InputResolver({"path": str(tmp_path / "missing")}, environ={})

    with pytest.raises(ReviewAppError, match="Working directory not found"):
        resolver.resolve(_event())


def test_resolve_bundles_secrets_postgres_and_config_file(tmp_path):
    resolver = InputResolver(
        {"path": str(tmp_path), "secrets": "API_KEY=x DEBUG=1", "postgres": "pr-42-db"},
        environ={},
    )

    inputs = resolver.resolve(_event())

    assert inputs.secrets == ("API_KEY=x", "DEBUG=1")
    assert inputs.postgres_app == "pr-42-db"
    assert inputs.working_directory == str(tmp_path)
    assert inputs.config_file == str(tmp_path / "fly.toml")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, "--ha=false"),
        ("", "--ha=false"),
        ("true", "--ha=true"),
        ("FALSE", "--ha=false"),
        (True, "--ha=true"),
        ("--ha=true", "--ha=true"),
        ("--ha=false", "--ha=false"),
    ],
)
def test_normalize_ha_flag(raw, expected):
    assert normalize_ha_flag(raw) == expected


def test_normalize_ha_flag_rejects_garbage():
    with pytest.raises(ReviewAppError, match="Invalid value 'maybe' for ha"):
        normalize_ha_flag("maybe")


def test_split_key_values_keeps_order_and_accepts_lists():
    assert split_key_values(" B=2\n\nA=1  C=3 ", "build_args") == ("B=2", "A=1", "C=3")
    assert split_key_values(["X=1", "Y="], "build_args") == ("X=1", "Y=")
    assert split_key_values(None, "build_args") == ()


@pytest.mark.parametrize("entry", ["NOVALUE", "=value"])
def test_split_key_values_rejects_malformed_entries(entry):
    with pytest.raises(ReviewAppError, match="KEY=VALUE"):
        split_key_values(entry, "secrets")


def test_first_set_and_coerce_bool():
    assert first_set(None, "  ", "x", default="d") == "x"
    assert first_set(None, "", default="d") == "d"
    assert coerce_bool("yes", "wait") is True
    assert coerce_bool(None, "wait", default=True) is True
