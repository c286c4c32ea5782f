import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from fuzzctl.errors import ToolError, UsageError
from fuzzctl.kubectl import Kubectl
from fuzzctl.request import parse_resource_tokens

from conftest import API_RESOURCES


def test_list_resources_args():
    kubectl = Kubectl()
    request = parse_resource_tokens("pods", ["-A", "-l", "app=web", "--tail=5"])
    with patch.object(kubectl, "output", return_value="") as output:
        kubectl.list_resources(request)
    output.assert_called_once_with(["get", "pods", "-A", "-l", "app=web"])


def test_resource_type_names():
    kubectl = Kubectl()
    completed = MagicMock(returncode=0, stdout=API_RESOURCES, stderr="")
    with patch.object(kubectl, "run", return_value=completed) as run:
        names = kubectl.resource_type_names()
    assert {"pods", "po", "pod", "configmaps", "cm", "secrets", "secret"} <= names
    assert {"deployments", "deploy", "deployment", "deployments.apps"} <= names
    assert "" not in names
    assert "pods-typo" not in names
    run.assert_called_once_with(["api-resources"])


def test_resource_type_names_tolerates_partial_discovery(caplog):
    caplog.set_level(logging.WARNING)
    kubectl = Kubectl()
    stderr = (
        "error: unable to retrieve the complete list of server APIs: "
        "metrics.k8s.io/v1beta1: the server is currently unable to handle the request\n"
    )
    completed = MagicMock(returncode=1, stdout=API_RESOURCES, stderr=stderr)
    with patch.object(kubectl, "run", return_value=completed):
        names = kubectl.resource_type_names()
    assert {"pods", "po", "deployments.apps"} <= names
    assert "metrics.k8s.io" in caplog.text


def test_resource_type_names_fails_without_table():
    kubectl = Kubectl()
    completed = MagicMock(returncode=1, stdout="", stderr="error: connection refused\n")
    with patch.object(kubectl, "run", return_value=completed):
        with pytest.raises(ToolError, match="connection refused") as excinfo:
            kubectl.resource_type_names()
    assert excinfo.value.exit_code == 1


def test_container_names_regular_then_init():
    kubectl = Kubectl()
    with patch.object(kubectl, "output", side_effect=["app sidecar", "init-db"]) as output:
        names = kubectl.container_names("web-1", "test")
    assert names == ["app", "sidecar", "init-db"]
    first = output.call_args_list[0][0][0]
    assert first == [
        "get", "pods/web-1", "-n", "test", "-o", "jsonpath={.spec.containers[*].name}",
    ]
    second = output.call_args_list[1][0][0]
    assert second[-1] == "jsonpath={.spec.initContainers[*].name}"


def test_container_names_without_init_containers():
    kubectl = Kubectl()
    with patch.object(kubectl, "output", side_effect=["app", ""]):
        assert kubectl.container_names("web-1", None) == ["app"]


def test_secret_data_keeps_quoted_keys():
    kubectl = Kubectl()
    raw = json.dumps({'we"ird': "YQ==", "password": "cw=="})
    with patch.object(kubectl, "output", return_value=raw) as output:
        data = kubectl.secret_data("db", "prod")
    assert data == {'we"ird': "YQ==", "password": "cw=="}
    assert output.call_args[0][0][:4] == ["get", "secrets/db", "-n", "prod"]


def test_secret_data_empty():
    kubectl = Kubectl()
    with patch.object(kubectl, "output", return_value=""):
        assert kubectl.secret_data("db", None) == {}


def test_secret_data_malformed():
    kubectl = Kubectl()
    with patch.object(kubectl, "output", return_value="map[a:b]"):
        with pytest.raises(UsageError):
            kubectl.secret_data("db", None)
