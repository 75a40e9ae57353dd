import io
import json
from types import SimpleNamespace

import pytest

from binder.config import Settings
from binder.registry import BinderRegistry
from binder.values import RequestValues


class FakeRequest:
    """Just enough of cherrypy.request for binding."""

    def __init__(self, params=None, body=None, content_type=None, unique_id="req-1"):
        self.params = dict(params or {})
        self.headers = {}
        self.body = None
        self.unique_id = unique_id
        if body is not None:
            raw = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
            self.body = io.BytesIO(raw)
            self.headers["Content-Type"] = content_type or "application/json"


@pytest.fixture
def registry():
    return BinderRegistry(Settings())


@pytest.fixture
def make_values():
    def _make(params=None, *, path_vars=None, body=None, request=None):
        return RequestValues(params, path_vars=path_vars, body=body, request=request)

    return _make


@pytest.fixture
def output():
    return SimpleNamespace(status=None, headers={})
