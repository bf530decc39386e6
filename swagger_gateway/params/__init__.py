"""Parameters module - extraction and merging of declared parameters."""

from .exceptions import (
    ParameterError,
    ExtractionError,
    MissingRequiredParameter,
    MissingRequiredBodyField,
    InvalidParameterType,
    UnsupportedParameterType,
)
from .models import ExtractedParameterSet, MergedParameterSet
from .merger import deep_merge, merge
from .extractor import coerce_value, extract, extract_parameters


__all__ = [
    "ParameterError",
    "ExtractionError",
    "MissingRequiredParameter",
    "MissingRequiredBodyField",
    "InvalidParameterType",
    "UnsupportedParameterType",
    "ExtractedParameterSet",
    "MergedParameterSet",
    "deep_merge",
    "merge",
    "coerce_value",
    "extract",
    "extract_parameters",
]
