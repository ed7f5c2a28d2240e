import inspect
from typing import List, Optional

import pytest

from optfactory import GenericFactory
from optfactory.analysis import ParameterDescriptor, camel_to_snake, inspect_target, load_target
from optfactory.config import EnvSource
from optfactory.constants import MISSING
from optfactory.exceptions import InvalidTargetError


class Exporter:
    def __init__(self, endpointUrl: str, maxRetries: int = 3, headers: Optional[dict] = None):
        self.endpoint_url = endpointUrl
        self.max_retries = maxRetries
        self.headers = headers


class NoConstructor:
    pass


class InheritsConstructor(Exporter):
    pass


class Variadic:
    def __init__(self, name, *args, flag: bool = False, **kwargs):
        self.name = name


class Unresolvable:
    def __init__(self, thing: "DoesNotExist", count: int = 1):
        self.thing = thing


class Untyped:
    def __init__(self, a, b=None):
        pass


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("name", "name"),
        ("maxRetries", "max_retries"),
        ("endpointUrl", "endpoint_url"),
        ("HTTPClient", "http_client"),
        ("getHTTPResponseCode", "get_http_response_code"),
        ("URL", "url"),
        ("already_snake", "already_snake"),
        ("_private", "private"),
        ("spanExporter2", "span_exporter2"),
    ],
)
def test_camel_to_snake(raw, expected):
    assert camel_to_snake(raw) == expected


@pytest.mark.parametrize("raw", ["maxRetries", "HTTPClient", "aBC", "XMLHttpRequest", "x"])
def test_camel_to_snake_is_idempotent(raw):
    once = camel_to_snake(raw)
    assert camel_to_snake(once) == once
    assert camel_to_snake(raw) == once


def test_inspect_target_orders_parameters_and_reads_defaults():
    params = inspect_target(Exporter)

    assert [p.position for p in params] == [0, 1, 2]
    assert [p.name for p in params] == ["endpoint_url", "max_retries", "headers"]
    assert [p.parameter_name for p in params] == ["endpointUrl", "maxRetries", "headers"]

    url, retries, headers = params
    assert url.required is True
    assert url.default is MISSING
    assert url.has_default is False
    assert url.declared_type is str

    assert retries.required is False
    assert retries.default == 3
    assert retries.declared_type is int

    assert headers.has_default is True
    assert headers.default is None
    assert headers.declared_type == Optional[dict]


def test_descriptor_is_immutable():
    param = inspect_target(Exporter)[0]
    assert isinstance(param, ParameterDescriptor)
    with pytest.raises(Exception):
        param.name = "other"


def test_class_without_constructor_has_no_parameters():
    assert inspect_target(NoConstructor) == ()


def test_inherited_constructor_is_inspected():
    assert [p.name for p in inspect_target(InheritsConstructor)] == ["endpoint_url", "max_retries", "headers"]


def test_variadic_parameters_are_skipped_and_keyword_only_flagged():
    params = inspect_target(Variadic)
    assert [p.name for p in params] == ["name", "flag"]
    assert params[0].keyword_only is False
    assert params[1].keyword_only is True
    assert params[1].position == 1
    assert params[1].default is False


def test_unresolvable_annotation_has_no_declared_type():
    thing, count = inspect_target(Unresolvable)
    assert thing.declared_type is None
    assert count.declared_type is int


def test_untyped_parameters():
    a, b = inspect_target(Untyped)
    assert a.declared_type is None and a.required
    assert b.declared_type is None and not b.required and b.default is None


def test_load_target_accepts_classes_and_import_paths():
    assert load_target(Exporter) is Exporter
    assert load_target("optfactory.config.EnvSource") is EnvSource
    assert load_target("optfactory.config:EnvSource") is EnvSource


@pytest.mark.parametrize(
    "target",
    [
        "optfactory.config.NoSuchClass",
        "no_such_module_xyz.Thing",
        "Thing",
        "",
        "optfactory.config.collect_options",
        42,
    ],
)
def test_load_target_rejects_invalid_targets(target):
    with pytest.raises(InvalidTargetError) as exc:
        load_target(target)
    assert "Could not create reflection for class" in str(exc.value)
    assert exc.value.target == target


def test_reflection_failure_is_wrapped(monkeypatch):
    def broken_signature(obj, *a, **k):
        raise ValueError("no signature found")

    monkeypatch.setattr(inspect, "signature", broken_signature)

    with pytest.raises(InvalidTargetError) as exc:
        inspect_target(Exporter)
    assert isinstance(exc.value.cause, ValueError)
    assert exc.value.__cause__ is exc.value.cause


def test_inspection_does_not_touch_target():
    before = dict(vars(Exporter))
    inspect_target(Exporter)
    assert dict(vars(Exporter)) == before


def test_generic_annotations_are_kept():
    class Batch:
        def __init__(self, items: List[int]):
            self.items = items

    (items,) = inspect_target(Batch)
    assert items.declared_type == List[int]


class Pooled:
    def __new__(cls, *args, **kwargs):
        return super().__new__(cls)

    def __init__(self, endpointUrl: str, retries: int = 3):
        self.endpoint_url = endpointUrl
        self.retries = retries


def test_constructor_is_read_past_custom_new():
    url, retries = inspect_target(Pooled)

    assert (url.name, url.parameter_name, url.declared_type, url.required) == ("endpoint_url", "endpointUrl", str, True)
    assert (retries.position, retries.default, retries.declared_type) == (1, 3, int)


def test_factory_builds_target_with_custom_new():
    factory = GenericFactory(Pooled)
    assert factory.options == ["endpoint_url", "retries"]
    assert factory.required_options == ["endpoint_url"]

    pooled = factory.build({"endpoint_url": "http://collector", "retries": 5})
    assert isinstance(pooled, Pooled)
    assert (pooled.endpoint_url, pooled.retries) == ("http://collector", 5)
