"""
WordLog Backend — Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract between frontend and backend.
Why:   Automatic serialization and OpenAPI doc generation.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate Swagger/OpenAPI documentation.

Design Decision:
    WordObservationCreate does no coercion of its own. Type coercion,
    required fields, trimming, lower-casing and the count minimum are all
    enforced by the record store (app.models.word_observation), so the same
    rules apply whether a record arrives over HTTP or from Python code.

    JSON field names are camelCase (interviewTitle, createdAt) to match the
    stored documents; Python attribute names are snake_case.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class WordObservationCreate(BaseModel):
    """
    What:  Body of POST /api/users.
    Who:   Sent by the frontend word tally form.

    Values are typed Any so they reach validate_word_observation exactly as
    sent; it alone decides what is coerced and what is rejected.
    """

    interviewee: Any = Field(default=None, description="Who was interviewed (string)")
    interview_title: Any = Field(
        default=None,
        alias="interviewTitle",
        description="Title of the interview transcript (string)",
    )
    word: Any = Field(default=None, description="Observed word, stored lower-cased (string)")
    count: Any = Field(default=None, description="Number of occurrences, integer >= 0")
    category: Any = Field(
        default=None,
        description="Free-form grouping, e.g. work, stress, people (string)",
    )
    date: Any = Field(default=None, description="When the interview took place (ISO-8601)")

    model_config = ConfigDict(populate_by_name=True)

    def to_candidate(self) -> Dict[str, Any]:
        """Plain mapping in stored-document key names, for the record store."""
        return self.model_dump(by_alias=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class WordObservationResponse(BaseModel):
    """
    What:  A stored WordObservation as returned by the API.
    Who:   Items of GET /api/users and the body of POST /api/users (201).
    """

    id: str = Field(description="MongoDB ObjectId as a hex string")
    interviewee: str
    interview_title: Optional[str] = Field(default=None, alias="interviewTitle")
    word: str
    count: int
    category: Optional[str] = None
    date: Optional[datetime] = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "WordObservationResponse":
        """Build a response from a raw MongoDB document (with _id)."""
        return cls(
            id=str(document["_id"]),
            interviewee=document["interviewee"],
            interview_title=document.get("interviewTitle"),
            word=document["word"],
            count=document["count"],
            category=document.get("category"),
            date=document.get("date"),
            created_at=document["createdAt"],
            updated_at=document["updatedAt"],
        )


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "count must be greater than or equal to 0",
            "details": {"field": "count", "errors": [...]},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MongoDB connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
