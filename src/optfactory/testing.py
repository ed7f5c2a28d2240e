"""Assertions over recorded trace structures.

:func:`assert_trace_structure` compares a flat, in-order collection of
recorded spans (for example the output of OpenTelemetry's
``InMemorySpanExporter.get_finished_spans()``) against an expected tree:

.. code-block:: python

    assert_trace_structure(exporter.get_finished_spans(), [
        {
            "name": "root-span",
            "kind": SpanKind.SERVER,
            "children": [
                {"name": "child-span", "attributes": {"attribute.one": "value1"}},
            ],
        },
    ])

Spans are read through the attributes of the OpenTelemetry SDK
``ReadableSpan``: ``name``, ``context.span_id``, ``parent``, ``kind``,
``attributes``, ``status.status_code``, ``status.description`` and
``events`` (each with ``name`` and ``attributes``).

Expected spans are dicts. Only ``name`` is mandatory; ``kind``,
``attributes``, ``status`` (``code`` and optional ``description``), ``events``
and ``children`` are checked when present. The number of root spans and,
where ``children`` is given, the number of children always have to match.
In non-strict mode expected attributes and events may be a subset of the
recorded ones; in strict mode they have to be equal, and a span whose
expectation has no ``children`` must have none.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence


def _span_id(span: Any) -> Optional[int]:
    ctx = getattr(span, "context", None)
    return getattr(ctx, "span_id", None)


def _parent_id(span: Any) -> Optional[int]:
    parent = getattr(span, "parent", None)
    return getattr(parent, "span_id", None) if parent is not None else None


def _normalize(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_normalize(v) for v in value)
    if isinstance(value, tuple):
        return tuple(_normalize(v) for v in value)
    return value


def _attributes(obj: Any) -> Dict[str, Any]:
    return {k: _normalize(v) for k, v in dict(getattr(obj, "attributes", None) or {}).items()}


class _Node:
    __slots__ = ("span", "children")

    def __init__(self, span: Any) -> None:
        self.span = span
        self.children: List["_Node"] = []


def _build_forest(spans: Iterable[Any]) -> List[_Node]:
    nodes = [_Node(s) for s in spans]
    by_id = {_span_id(n.span): n for n in nodes if _span_id(n.span) is not None}
    roots: List[_Node] = []
    for node in nodes:
        parent = by_id.get(_parent_id(node.span))
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots


class _TraceComparison:
    def __init__(self, strict: bool) -> None:
        self.strict = strict

    def spans(self, actual: Sequence[_Node], expected: Sequence[Mapping[str, Any]], path: str) -> None:
        if len(actual) != len(expected):
            if path:
                raise AssertionError(f"Expected {len(expected)} child spans for {path}, but found {len(actual)}")
            raise AssertionError(f"Expected {len(expected)} root spans, but found {len(actual)}")
        for node, exp in zip(actual, expected):
            self.span(node, exp, f"{path} > {exp.get('name')}" if path else f"span '{exp.get('name')}'")

    def span(self, node: _Node, expected: Mapping[str, Any], path: str) -> None:
        span = node.span
        if "name" not in expected:
            raise AssertionError(f"Expected span structure at {path} has no 'name'")
        if span.name != expected["name"]:
            raise AssertionError(f"Expected span name '{expected['name']}', but found '{span.name}' at {path}")
        if "kind" in expected and span.kind != expected["kind"]:
            raise AssertionError(f"Expected kind {expected['kind']!r}, but found {span.kind!r} at {path}")
        if "attributes" in expected:
            self.attributes(_attributes(span), expected["attributes"], f"{path} attributes")
        if "status" in expected:
            self.status(span, expected["status"], path)
        if "events" in expected:
            self.events(list(getattr(span, "events", None) or ()), expected["events"], path)
        if "children" in expected:
            self.spans(node.children, expected["children"], path)
        elif self.strict and node.children:
            raise AssertionError(f"Expected 0 child spans for {path}, but found {len(node.children)}")

    def attributes(self, actual: Mapping[str, Any], expected: Mapping[str, Any], path: str) -> None:
        for key, value in expected.items():
            if key not in actual:
                raise AssertionError(f"Expected attribute '{key}' not found in {path}")
            if actual[key] != _normalize(value):
                raise AssertionError(f"Expected attribute '{key}' to be {value!r}, but found {actual[key]!r} in {path}")
        if self.strict and len(actual) != len(expected):
            extra = sorted(set(actual) - set(expected))
            raise AssertionError(
                f"Expected {len(expected)} attributes, but found {len(actual)} in {path} (unexpected: {', '.join(extra)})"
            )

    def status(self, span: Any, expected: Mapping[str, Any], path: str) -> None:
        status = getattr(span, "status", None)
        code = getattr(status, "status_code", None)
        if "code" in expected and code != expected["code"]:
            raise AssertionError(f"Expected status code {expected['code']!r}, but found {code!r} at {path}")
        description = getattr(status, "description", None)
        if "description" in expected and description != expected["description"]:
            raise AssertionError(
                f"Expected status description {expected['description']!r}, but found {description!r} at {path}"
            )

    def events(self, actual: List[Any], expected: Sequence[Mapping[str, Any]], path: str) -> None:
        if self.strict:
            if len(actual) != len(expected):
                raise AssertionError(f"Expected {len(expected)} events, but found {len(actual)} at {path}")
            for event, exp in zip(actual, expected):
                if event.name != exp.get("name"):
                    raise AssertionError(f"Expected event '{exp.get('name')}', but found '{event.name}' at {path}")
                self.attributes(_attributes(event), exp.get("attributes", {}), f"{path} event '{event.name}'")
            return

        for exp in expected:
            candidates = [e for e in actual if e.name == exp.get("name")]
            if not candidates:
                raise AssertionError(f"Expected event '{exp.get('name')}' not found at {path}")
            if "attributes" not in exp:
                continue
            errors: List[str] = []
            for event in candidates:
                try:
                    self.attributes(_attributes(event), exp["attributes"], f"{path} event '{event.name}'")
                    break
                except AssertionError as e:
                    errors.append(str(e))
            else:
                raise AssertionError(errors[0])


def assert_trace_structure(spans: Iterable[Any], expected: Sequence[Mapping[str, Any]], strict: bool = False) -> None:
    """Assert that recorded *spans* form the *expected* tree.

    Args:
        spans: Recorded spans in recording order.
        expected: Expected root spans, each a dict as described in the module
            documentation.
        strict: Require attributes, events and children to match exactly
            instead of being a superset of the expectation.

    Raises:
        AssertionError: Describing the first divergence found.
    """
    _TraceComparison(strict).spans(_build_forest(spans), expected, "")
