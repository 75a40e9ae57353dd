import json
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Optional

import cherrypy
import pytest

from binder.attributes import WILDCARD, param
from binder.config import Settings
from binder.exceptions import NonConformingHandlerError, WrapError
from binder.registry import BinderRegistry
from binder.response import Basic, Error, Json
from binder.wrapper import Wrapper, action_handler, params, wrap

from conftest import FakeRequest


@dataclass
class Filters:
    status: str = param("status")
    limit: int = param("limit", default=10)


def show(id: int, verbose: bool) -> Json:
    return Json({"id": id, "verbose": verbose})


def search(page: int, filters: Filters) -> Json:
    return Json({"page": page, "status": filters.status, "limit": filters.limit})


def total(*amounts: int) -> Basic:
    return Basic(str(sum(amounts)))


def greet(name: str, *, shout: bool) -> Basic:
    return Basic(name.upper() if shout else name)


def maybe(id: Optional[int]) -> Error | Json:
    if id is None:
        return Error(404, "not found")
    return Json({"id": id})


def untyped(x):
    return x


def run(handler, params=None, path_vars=None, body=None, output=None):
    output = output or SimpleNamespace(status=None, headers={})
    body_bytes = handler.handle(FakeRequest(params, body=body), output, path_vars)
    return output, body_bytes


def test_exact_arity_wrap():
    handler = action_handler(show, "id", "verbose")
    assert [(a.name, a.type) for a in handler.args] == [("id", int), ("verbose", bool)]


def test_exact_arity_rejects_too_many_names_at_wrap_time():
    with pytest.raises(WrapError, match="expected 2 parameter names, got 3"):
        action_handler(show, "id", "verbose", "extra")


def test_exact_arity_rejects_too_few_names():
    with pytest.raises(WrapError):
        action_handler(show, "id")


def test_variadic_defaults_accepts_fewer_names():
    handler = wrap(search, "page")
    assert [a.name for a in handler.args] == ["page", WILDCARD]


def test_variadic_defaults_rejects_too_many_names():
    with pytest.raises(WrapError, match="takes 2 parameters"):
        wrap(show, "id", "verbose", "extra")


def test_wildcard_struct_primed_at_wrap_time(registry):
    wrap(search, "page", registry=registry)
    assert Filters in registry.struct_attributes


def test_invoke_binds_and_renders():
    output, body = run(wrap(show, "id", "verbose"), {"id": "7", "verbose": "on"})
    assert output.status == 200
    assert body == b'{\n  "id": 7,\n  "verbose": true\n}'


def test_wildcard_struct_gets_whole_value_set():
    output, body = run(wrap(search, "page"), {"page": "2", "status": "open"})
    assert json.loads(body) == {"page": 2, "status": "open", "limit": 10}


def test_path_vars_take_priority():
    _, body = run(wrap(show, "id", "verbose"), {"id": "1"}, path_vars={"id": "2"})
    assert b'"id": 2' in body


def test_pat_style_param_takes_priority():
    _, body = run(wrap(show, "id", "verbose"), {":id": "5", "id": "1"})
    assert b'"id": 5' in body


def test_json_body_is_a_fallback_source():
    _, body = run(wrap(show, "id", "verbose"), {"id": "3"}, body={"id": 4, "verbose": True})
    assert body == b'{\n  "id": 3,\n  "verbose": true\n}'


def test_variadic_callable_spreads_bound_list():
    handler = wrap(total, "amounts")
    assert handler.is_variadic
    _, body = run(handler, {"amounts": "1,2,x,4"})
    assert body == b"7"


def test_keyword_only_parameters():
    _, body = run(wrap(greet, "name", "shout"), {"name": "bob", "shout": "yes"})
    assert body == b"BOB"


def test_bound_methods_exclude_self():
    class Api:
        def get(self, id: int) -> Json:
            return Json({"id": id})

    handler = action_handler(Api().get, "id")
    _, body = run(handler, {"id": "12"})
    assert b'"id": 12' in body


def test_union_of_responses_and_optional_param():
    handler = wrap(maybe, "id")
    output, body = run(handler)
    assert (output.status, body) == (404, b"not found")
    output, body = run(handler, {"id": "3"})
    assert output.status == 200


def test_request_parameter():
    def who(request: cherrypy._cprequest.Request) -> Basic:
        return Basic(request.unique_id)

    _, body = run(wrap(who))
    assert body == b"req-1"


def test_mapping_wildcard_parameter():
    def echo(values: dict) -> Json:
        return Json(values)

    _, body = run(wrap(echo), {"a": "1"}, path_vars={"b": "2"})
    assert json.loads(body) == {"a": "1", "b": "2"}


def test_non_response_return_annotation_fails_at_wrap_time():
    def bad(id: int) -> dict:
        return {}

    with pytest.raises(NonConformingHandlerError, match="does not implement apply_to"):
        wrap(bad, "id")


def test_none_return_annotation_fails_at_wrap_time():
    def bad() -> None:
        pass

    with pytest.raises(NonConformingHandlerError):
        wrap(bad)


def test_unannotated_return_is_checked_per_call():
    handler = wrap(untyped, "x")
    with pytest.raises(NonConformingHandlerError, match="returned str"):
        run(handler, {"x": "plain"})


def test_unannotated_parameters_bind_as_strings():
    handler = wrap(lambda x: Basic(repr(x)), "x")
    _, body = run(handler, {"x": "42"})
    assert body == b"'42'"


def test_unresolvable_parameter_annotation_fails_at_wrap_time():
    @dataclass
    class Local:
        q: str = param("q")

    def handler(page: "int", f: "Local") -> "Basic":
        return Basic(repr((page, f)))

    with pytest.raises(WrapError, match="cannot resolve type hints"):
        wrap(handler, "page")


def test_unresolvable_struct_field_fails_at_wrap_time():
    @dataclass
    class Broken:
        ref: "Missing" = param("ref", default=None)  # noqa: F821

    def handler(b: Broken) -> Basic:
        return Basic("")

    with pytest.raises(WrapError, match="cannot resolve type hints of b"):
        wrap(handler)


def test_json_uses_the_wrapping_registry_settings():
    compact = BinderRegistry(Settings(json_indent=None))
    _, body = run(wrap(show, "id", "verbose", registry=compact), {"id": "5"})
    assert body == b'{"id": 5, "verbose": false}'


def test_explicit_json_indent_beats_registry_settings():
    def one() -> Json:
        return Json([1], indent=0)

    compact = BinderRegistry(Settings(json_indent=None))
    _, body = run(wrap(one, registry=compact))
    assert body == b"[\n1\n]"


def test_not_callable():
    with pytest.raises(WrapError, match="not callable"):
        Wrapper(42)


def test_wrapper_still_calls_through():
    assert wrap(show, "id", "verbose")(3, False).data == {"id": 3, "verbose": False}


def test_params_decorator():
    @params("id", "verbose")
    def decorated(id: int, verbose: bool) -> Json:
        return Json(id)

    assert isinstance(decorated, Wrapper)
    assert [a.name for a in decorated.args] == ["id", "verbose"]


def test_default_maps_path_segments(monkeypatch):
    output = SimpleNamespace(status=None, headers={})
    monkeypatch.setattr(cherrypy, "request", FakeRequest({"verbose": "1"}))
    monkeypatch.setattr(cherrypy, "response", output)

    handler = wrap(show, "id", "verbose")
    assert handler.default("42") == b'{\n  "id": 42,\n  "verbose": true\n}'
    assert output.status == 200


def test_default_rejects_extra_segments(monkeypatch):
    monkeypatch.setattr(cherrypy, "request", FakeRequest())
    monkeypatch.setattr(cherrypy, "response", SimpleNamespace(status=None, headers={}))

    with pytest.raises(cherrypy.HTTPError) as excinfo:
        wrap(show, "id", "verbose").default("1", "2", "3")
    assert excinfo.value.code == 404


def test_index_without_segments(monkeypatch):
    monkeypatch.setattr(cherrypy, "request", FakeRequest({"id": "1"}))
    monkeypatch.setattr(cherrypy, "response", SimpleNamespace(status=None, headers={}))

    assert b'"id": 1' in wrap(show, "id", "verbose").index()


def test_handlers_are_exposed():
    handler = wrap(show, "id", "verbose")
    assert handler.index.exposed and handler.default.exposed
