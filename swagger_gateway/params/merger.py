"""Merge endpoint-scoped and operation-scoped parameter sets."""

from typing import Any, Mapping

from .models import ExtractedParameterSet, MergedParameterSet


def deep_merge(a: Mapping[str, Any], b: Mapping[str, Any]) -> dict[str, Any]:
    """Deep union of two mappings.

    Keys present on one side are kept. Where both sides hold a mapping the
    values are merged recursively, otherwise the value from ``b`` wins.
    """
    merged = dict(a)
    for key, value in b.items():
        current = merged.get(key)
        if key in merged and isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _merge_body(a: Any, b: Any) -> Any:
    if b is None:
        return a
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return deep_merge(a, b)
    return b


def merge(
    a: ExtractedParameterSet,
    b: ExtractedParameterSet,
    extra: Mapping[str, Any] | None = None,
) -> MergedParameterSet:
    """Merge two extracted parameter sets, letting ``b`` win at the leaves.

    Args:
        a: Endpoint-scoped parameters.
        b: Operation-scoped parameters.
        extra: All values available for the request.

    Returns:
        MergedParameterSet holding the union of both sets.
    """
    return MergedParameterSet(
        header=deep_merge(a.header, b.header),
        query=deep_merge(a.query, b.query),
        path=deep_merge(a.path, b.path),
        formdata=deep_merge(a.formdata, b.formdata),
        body=_merge_body(a.body, b.body),
        extra=dict(extra or {}),
    )
