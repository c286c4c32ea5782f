import pytest
from unittest.mock import MagicMock

from fuzzctl.config import Settings
from fuzzctl.runtime import build_tools
from fuzzctl.selector import FzfSelector

POD_LISTING = """\
NAME     READY   STATUS    RESTARTS   AGE
web-1    1/1     Running   0          5m
web-2    1/1     Running   0          3m
"""

ALL_NAMESPACES_POD_LISTING = """\
NAMESPACE   NAME      READY   STATUS      RESTARTS   AGE
default     api-1     1/1     Running     0          5m
batch       job-7xk   0/1     Completed   0          2h
"""

ALL_CATEGORY_LISTING = """\
NAMESPACE   NAME        READY   STATUS    RESTARTS   AGE
default     pod/web-1   1/1     Running   0          5m

NAMESPACE     NAME               TYPE        CLUSTER-IP   EXTERNAL-IP   PORT(S)   AGE
kube-system   service/kube-dns   ClusterIP   10.0.0.10    <none>        53/UDP    9d
"""

API_RESOURCES = """\
NAME          SHORTNAMES   APIVERSION   NAMESPACED   KIND
configmaps    cm           v1           true         ConfigMap
pods          po           v1           true         Pod
secrets                    v1           true         Secret
deployments   deploy       apps/v1      true         Deployment
"""


@pytest.fixture
def settings():
    return Settings(color=False)


@pytest.fixture
def tools(settings):
    """
    Real tool handles with the selector replaced by a mock, so tests decide
    what the "user" picks. Individual tests patch kubectl/terraform methods.
    """
    handles = build_tools(settings)
    handles.selector = MagicMock(spec=FzfSelector)
    return handles


@pytest.fixture
def known_types(mocker, tools):
    return mocker.patch.object(
        tools.kubectl,
        "resource_type_names",
        return_value={"pods", "po", "pod", "secrets", "secret", "deployments", "deploy"},
    )
