"""Build execution exports."""

from .build_contracts import CompileRequest, PackageOutcome, PackageRequest
from .build_use_case import (
    BuildExecutionError,
    execute_compile,
    execute_generate_types,
    execute_package,
    execute_watch,
    prepare_build_context,
)

__all__ = [
    "BuildExecutionError",
    "CompileRequest",
    "PackageOutcome",
    "PackageRequest",
    "execute_compile",
    "execute_generate_types",
    "execute_package",
    "execute_watch",
    "prepare_build_context",
]
