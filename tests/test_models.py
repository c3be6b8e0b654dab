import pytest

from errors import UploadError, ValidationError
from provisioning import DeploymentSpec, FatalFailure, ProvisionedResources


def test_spec_normalizes_input():
    spec = DeploymentSpec(
        name=" demo ",
        admin_key="k1",
        proxy_ip=" 1.2.3.4",
        root_proxy_url="   ",
        custom_domain=" App.Example.com ",
    )
    assert spec.name == "demo"
    assert spec.proxy_ip == "1.2.3.4"
    assert spec.root_proxy_url is None
    assert spec.custom_domain == "app.example.com"
    spec.validate()


def test_validation_names_every_missing_field():
    with pytest.raises(ValidationError) as excinfo:
        DeploymentSpec(name="", admin_key="", proxy_ip="").validate()
    assert excinfo.value.fields == ["worker name", "admin key", "proxy IP"]


@pytest.mark.parametrize("name", ["Demo", "-demo", "demo-", "my worker", "a" * 64])
def test_malformed_worker_name(name):
    with pytest.raises(ValidationError) as excinfo:
        DeploymentSpec(name=name, admin_key="k", proxy_ip="1.1.1.1").validate()
    assert excinfo.value.fields == ["worker name"]


@pytest.mark.parametrize("name", ["a", "bpb-1a2b3c", "my_worker", "a" * 63])
def test_valid_worker_name(name):
    DeploymentSpec(name=name, admin_key="k", proxy_ip="1.1.1.1").validate()


def test_resources_are_write_once():
    resources = ProvisionedResources()
    resources.namespace_id = "ns-1"

    with pytest.raises(AttributeError):
        resources.namespace_id = "ns-2"
    with pytest.raises(AttributeError):
        resources.unknown = "x"

    assert resources.namespace_id == "ns-1"
    assert resources.as_dict()["database_id"] is None


def test_fatal_failure_reason_is_error_message():
    assert FatalFailure(UploadError("bundle missing")).reason == "bundle missing"
