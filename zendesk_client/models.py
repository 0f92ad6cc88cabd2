"""
Typed request structures for Zendesk ticket operations.

Each request is a frozen pydantic model that validates itself on
construction and renders the nested {"ticket": {...}} payload the
Tickets API expects. Use build_request() to get the package's
ValidationError instead of pydantic's.
"""

import json
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from zendesk_client.exceptions import ValidationError

TICKET_STATUSES = ("new", "open", "pending", "hold", "solved", "closed")

RequestModel = TypeVar("RequestModel", bound=BaseModel)


class NoteType(Enum):
    PUBLIC = "Public"
    INTERNAL = "Internal"

    @classmethod
    def parse(cls, value: Union["NoteType", str]) -> "NoteType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        allowed = ", ".join(m.value for m in cls)
        raise ValidationError(f"Invalid note type {value!r}; expected one of: {allowed}")

    @property
    def is_public(self) -> bool:
        return self is NoteType.PUBLIC


class Priority(Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"
    URGENT = "Urgent"

    @classmethod
    def parse(cls, value: Union["Priority", str]) -> "Priority":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        allowed = ", ".join(m.value for m in cls)
        raise ValidationError(f"Invalid priority {value!r}; expected one of: {allowed}")

    @property
    def wire_value(self) -> str:
        return self.value.lower()


def normalize_priority(value: Union[Priority, str]) -> str:
    """Return the lower-case priority string sent to Zendesk."""
    return Priority.parse(value).wire_value


def _not_blank(value: str, name: str) -> str:
    if not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return value


def build_request(model: Type[RequestModel], **data: Any) -> RequestModel:
    """
    Construct a request model, raising the package's ValidationError on bad input.

    Args:
        model: Request model class
        **data: Field values

    Returns:
        The validated request
    """
    try:
        return model(**data)
    except pydantic.ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or model.__name__}: {error['msg']}"
            for error in e.errors()
        )
        raise ValidationError(problems) from e


class TicketComment(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    body: str
    note_type: NoteType

    @field_validator("body")
    @classmethod
    def body_not_blank(cls, value: str) -> str:
        return _not_blank(value, "Note body")

    @field_validator("note_type", mode="before")
    @classmethod
    def parse_note_type(cls, value: Any) -> NoteType:
        return NoteType.parse(value)

    def to_payload(self) -> Dict[str, Any]:
        return {"body": self.body, "public": self.note_type.is_public}


class TicketReference(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    ticket_id: int = Field(..., strict=True, gt=0)


class TicketNoteRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    ticket_id: int = Field(..., strict=True, gt=0)
    comment: TicketComment

    def to_payload(self) -> Dict[str, Any]:
        return {"ticket": {"comment": self.comment.to_payload()}}


class TicketCreateRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    subject: str
    priority: Priority
    comment: TicketComment
    ticket_form_id: Optional[int] = Field(default=None, strict=True, gt=0)

    @field_validator("subject")
    @classmethod
    def subject_not_blank(cls, value: str) -> str:
        return _not_blank(value, "Subject")

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value: Any) -> Priority:
        return Priority.parse(value)

    def to_payload(self) -> Dict[str, Any]:
        ticket = {
            "comment": self.comment.to_payload(),
            "priority": self.priority.wire_value,
            "subject": self.subject,
        }
        if self.ticket_form_id is not None:
            ticket["ticket_form_id"] = self.ticket_form_id
        return {"ticket": ticket}


class TicketUpdateRequest(BaseModel):
    """
    A partial update of an existing ticket.

    Only the fields that are set are sent. Extra fields are merged in
    below the named ones, so a named field always takes precedence over
    the same key in `fields`. Extra field values must be JSON-serializable.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ticket_id: int = Field(..., strict=True, gt=0)
    comment: Optional[TicketComment] = None
    subject: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[str] = None
    fields: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("subject")
    @classmethod
    def subject_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _not_blank(value, "Subject")

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value: Any) -> Optional[Priority]:
        if value is None:
            return None
        return Priority.parse(value)

    @field_validator("status")
    @classmethod
    def known_status(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        status = value.strip().lower()
        if status not in TICKET_STATUSES:
            raise ValueError(f"Invalid status {value!r}; expected one of: {', '.join(TICKET_STATUSES)}")
        return status

    @field_validator("fields")
    @classmethod
    def fields_serializable(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        try:
            json.dumps(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Extra fields must be JSON-serializable: {e}")
        return value

    @model_validator(mode="after")
    def has_changes(self) -> "TicketUpdateRequest":
        if self.comment is None and self.subject is None and self.priority is None \
                and self.status is None and not self.fields:
            raise ValueError("Nothing to update: set a comment or at least one field")
        return self

    def to_payload(self) -> Dict[str, Any]:
        ticket = dict(self.fields)
        if self.comment is not None:
            ticket["comment"] = self.comment.to_payload()
        if self.subject is not None:
            ticket["subject"] = self.subject
        if self.priority is not None:
            ticket["priority"] = self.priority.wire_value
        if self.status is not None:
            ticket["status"] = self.status
        return {"ticket": ticket}
