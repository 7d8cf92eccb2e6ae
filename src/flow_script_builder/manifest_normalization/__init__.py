"""Manifest normalization exports."""

from .field_types import JAVASCRIPT_PRIMITIVES, map_field_type
from .manifest_loader import MANIFEST_FILENAME, ManifestError, load_manifest, parse_manifest
from .manifest_models import (
    FlowDescriptor,
    FlowType,
    Manifest,
    ModelField,
    ModelRef,
    SchemaIssue,
    SimplifiedIntegration,
)
from .manifest_normalizer import (
    DuplicateFlowNameError,
    SchemaCycleError,
    collect_model_names,
    find_flow,
    normalize_manifest,
    resolve_model_fields,
    validate_descriptors,
)

__all__ = [
    "DuplicateFlowNameError",
    "FlowDescriptor",
    "FlowType",
    "JAVASCRIPT_PRIMITIVES",
    "MANIFEST_FILENAME",
    "Manifest",
    "ManifestError",
    "ModelField",
    "ModelRef",
    "SchemaCycleError",
    "SchemaIssue",
    "SimplifiedIntegration",
    "collect_model_names",
    "find_flow",
    "load_manifest",
    "map_field_type",
    "normalize_manifest",
    "parse_manifest",
    "resolve_model_fields",
    "validate_descriptors",
]
