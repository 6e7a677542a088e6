"""Multipart body encoding for dataset uploads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Any, Union

from gagara_boost.errors import ValidationError
from gagara_boost.types import UploadDatasetOptions

DEFAULT_FILENAME = "dataset.parquet"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
FILE_FIELD = "file"

UploadFileInput = Union[bytes, bytearray, memoryview, IO[bytes]]


@dataclass(frozen=True)
class MultipartBody:
    """A multipart payload in the shape httpx takes (``files=`` / ``data=``).

    ``file`` is either a ``(filename, content, content_type)`` tuple or an
    open named file object that httpx reads name and type from.
    """

    file: Any
    fields: dict[str, str] = field(default_factory=dict)

    @property
    def files(self) -> dict[str, Any]:
        return {FILE_FIELD: self.file}


def _is_named_file(payload: Any) -> bool:
    name = getattr(payload, "name", None)
    return callable(getattr(payload, "read", None)) and isinstance(name, str) and bool(name)


def encode_multipart(payload: UploadFileInput, options: UploadDatasetOptions | None = None) -> MultipartBody:
    """Build the multipart body for an upload.

    A named file object is passed through unchanged. Raw bytes and anonymous
    file objects (``io.BytesIO``) are wrapped with ``filename`` and
    ``content_type`` from ``options``.
    """
    options = options or {}
    filename = options.get("filename") or DEFAULT_FILENAME
    content_type = options.get("content_type") or options.get("contentType") or DEFAULT_CONTENT_TYPE

    if _is_named_file(payload):
        file_part: Any = payload
    elif isinstance(payload, (bytes, bytearray, memoryview)):
        file_part = (filename, bytes(payload), content_type)
    elif callable(getattr(payload, "read", None)):
        file_part = (filename, payload, content_type)
    else:
        raise ValidationError(
            f"Unsupported upload payload: {type(payload).__name__}. Pass bytes or a binary file object."
        )

    fields: dict[str, str] = {}
    workspace_id = options.get("workspace_id") or options.get("workspaceId")
    if workspace_id:
        fields["workspace_id"] = workspace_id
    alias = options.get("alias")
    if alias:
        fields["alias"] = alias

    return MultipartBody(file=file_part, fields=fields)
