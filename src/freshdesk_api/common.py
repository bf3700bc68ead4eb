from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

from pydantic import BaseModel, Field


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FileAttachment(BaseModel):
    """A file to upload as part of a multipart request."""

    name: Optional[str] = None
    mime_type: Optional[str] = None
    file_bytes: Optional[bytes] = None

    def as_upload(self) -> Tuple[str, bytes, str]:
        return (
            self.name or "attachment",
            self.file_bytes or b"",
            self.mime_type or "application/octet-stream",
        )


MultipartFiles = List[Tuple[str, Tuple[str, bytes, str]]]


class AttachmentRequest(BaseModel):
    """Request body that may carry files.

    Subclasses name the fields holding ``FileAttachment`` values in
    ``attachment_fields``; the body switches to multipart/form-data as soon as
    any of them is populated.
    """

    attachment_fields: ClassVar[Tuple[str, ...]] = ("attachments",)

    def has_attachments(self) -> bool:
        return any(getattr(self, name, None) for name in self.attachment_fields)

    def is_multipart_form_data_required(self) -> bool:
        return self.has_attachments()

    def to_multipart(self) -> Tuple[Dict[str, Any], MultipartFiles]:
        data: Dict[str, Any] = {}
        files: MultipartFiles = []
        payload = self.model_dump(mode="json", exclude_none=True, exclude=set(self.attachment_fields))
        for key, value in payload.items():
            _flatten_form_field(data, key, value)
        for name in self.attachment_fields:
            value = getattr(self, name, None)
            if isinstance(value, FileAttachment):
                files.append((name, value.as_upload()))
            elif value:
                files.extend((f"{name}[]", item.as_upload()) for item in value)
        return data, files


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _add_form_value(data: Dict[str, Any], key: str, value: str) -> None:
    if key not in data:
        data[key] = value
        return
    existing = data[key]
    if not isinstance(existing, list):
        existing = data[key] = [existing]
    existing.append(value)


def _flatten_form_field(data: Dict[str, Any], key: str, value: Any) -> None:
    """Flatten nested JSON into Rails-style form keys (``tags[]``, ``custom_fields[x]``)."""
    if value is None:
        return
    if isinstance(value, dict):
        for sub_key, sub_value in value.items():
            _flatten_form_field(data, f"{key}[{sub_key}]", sub_value)
    elif isinstance(value, list):
        for item in value:
            _flatten_form_field(data, f"{key}[]", item)
    else:
        _add_form_value(data, key, _form_value(value))


def format_query_value(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, (list, tuple, set)):
        return ",".join(format_query_value(item) for item in value)
    return str(value)


QueryParams = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def encode_query(params: QueryParams) -> str:
    """Percent-encode params into ``k=v&...`` form, dropping unset values."""
    items = params.items() if isinstance(params, Mapping) else params
    parts = []
    for key, value in items:
        if value is None:
            continue
        parts.append(f"{quote(str(key), safe='')}={quote(format_query_value(value), safe='')}")
    return "&".join(parts)


def build_url(path: str, params: Optional[QueryParams] = None) -> str:
    query = encode_query(params or {})
    if not query:
        return path
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{query}"


class Attachment(BaseModel):
    """File metadata as returned by Freshdesk on tickets, conversations and articles."""

    id: Optional[int] = None
    name: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[int] = None
    attachment_url: Optional[str] = None
    thumb_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExportJob(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    download_url: Optional[str] = None


class ExportFields(BaseModel):
    default_fields: List[str] = Field(default_factory=list)
    custom_fields: List[str] = Field(default_factory=list)


class AutocompleteResult(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_path: Optional[str] = None
