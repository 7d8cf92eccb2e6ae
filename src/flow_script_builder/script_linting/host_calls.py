"""Closed vocabulary of host operations a script may call."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

HOST_OBJECT_IDENTIFIER = "nango"


class HostCall(str, Enum):
    """Operations exposed on the host capability object."""

    BATCH_SEND = "batchSend"
    BATCH_SAVE = "batchSave"
    BATCH_DELETE = "batchDelete"
    LOG = "log"
    GET_FIELD_MAPPING = "getFieldMapping"
    SET_FIELD_MAPPING = "setFieldMapping"
    GET_METADATA = "getMetadata"
    SET_METADATA = "setMetadata"
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    GET_CONNECTION = "getConnection"
    SET_LAST_SYNC_DATE = "setLastSyncDate"
    GET_ENVIRONMENT_VARIABLES = "getEnvironmentVariables"
    TRIGGER_ACTION = "triggerAction"

    @classmethod
    def from_member(cls, member_name: str) -> HostCall | None:
        try:
            return cls(member_name)
        except ValueError:
            return None


DISALLOWED_IN_ACTION = frozenset(
    {
        HostCall.BATCH_SEND,
        HostCall.BATCH_SAVE,
        HostCall.BATCH_DELETE,
        HostCall.SET_LAST_SYNC_DATE,
    }
)

DEPRECATED_CALLS: Mapping[HostCall, HostCall] = MappingProxyType(
    {
        HostCall.BATCH_SEND: HostCall.BATCH_SAVE,
        HostCall.GET_FIELD_MAPPING: HostCall.GET_METADATA,
        HostCall.SET_FIELD_MAPPING: HostCall.SET_METADATA,
    }
)

# Calls whose last argument names the model the records belong to.
MODEL_REFERENCING_CALLS = frozenset({HostCall.BATCH_SAVE, HostCall.BATCH_DELETE})
