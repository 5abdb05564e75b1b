"""
WordLog Backend — WordObservation Document Schema
==================================================

What:  Declarative field rules for the documents stored in MongoDB, plus the
       function that checks and normalizes a candidate record against them.
Why:   MongoDB accepts any document shape, so the shape is enforced here.
       Keeping it a pure function over a plain mapping means the rules can be
       tested without a database.
Who:   Called by WordObservationStore.create() before every insert.

Stored document shape:
    {
        "_id":            ObjectId      (assigned by MongoDB)
        "interviewee":    str           required, trimmed
        "interviewTitle": str           optional, trimmed
        "word":           str           required, trimmed, lower-cased
        "count":          int           required, >= 0
        "category":       str           optional, trimmed
        "date":           datetime      optional (UTC)
        "createdAt":      datetime      assigned by the store
        "updatedAt":      datetime      assigned by the store
    }

Type coercion:
    Done by pydantic in lax mode. Strings accept numbers (3 becomes "3"),
    integers accept numeric strings and integral floats, dates accept
    ISO-8601 strings and datetimes. Booleans are never coerced. Anything
    else is a violation. Unknown keys in the candidate are dropped.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from pydantic import ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError


class FieldRule(NamedTuple):
    """One field of the WordObservation schema."""

    name: str
    kind: str  # "string" | "integer" | "date"
    required: bool = False
    trim: bool = False
    lowercase: bool = False
    min_value: Optional[int] = None


FIELD_RULES = (
    FieldRule("interviewee", "string", required=True, trim=True),
    FieldRule("interviewTitle", "string", trim=True),
    FieldRule("word", "string", required=True, trim=True, lowercase=True),
    FieldRule("count", "integer", required=True, min_value=0),
    FieldRule("category", "string", trim=True),  # e.g. "work", "stress", "people"
    FieldRule("date", "date"),
)


# ══════════════════════════════════════════════════════════════════════════
# Casters — raw JSON-ish value → stored Python type
# ══════════════════════════════════════════════════════════════════════════

class _Caster(NamedTuple):
    adapter: TypeAdapter
    rule: str
    message: str


# Pydantic's lax mode does the parsing; booleans are refused up front because
# lax mode would turn True into 1 or "True".
_CASTERS: Dict[str, _Caster] = {
    "string": _Caster(
        TypeAdapter(str, config=ConfigDict(coerce_numbers_to_str=True)),
        "type",
        "{name} must be a string",
    ),
    "integer": _Caster(TypeAdapter(int), "integer", "{name} must be an integer"),
    "date": _Caster(TypeAdapter(datetime), "date", "{name} must be an ISO-8601 date"),
}


class _CastFailure(Exception):
    def __init__(self, rule: str, message: str):
        super().__init__(message)
        self.rule = rule
        self.message = message


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _cast(rule: FieldRule, value: Any) -> Any:
    caster = _CASTERS[rule.kind]
    failure = _CastFailure(caster.rule, caster.message.format(name=rule.name))

    if isinstance(value, bool):
        raise failure
    if rule.kind == "date" and isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time(), tzinfo=timezone.utc)

    try:
        cast = caster.adapter.validate_python(value)
    except PydanticValidationError as exc:
        raise failure from exc

    if rule.kind == "date":
        return _as_utc(cast)
    return cast


def _violation(field: str, rule: str, message: str) -> Dict[str, str]:
    return {"field": field, "rule": rule, "message": message}


# ══════════════════════════════════════════════════════════════════════════
# Validation
# ══════════════════════════════════════════════════════════════════════════

def validate_word_observation(candidate: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check a candidate record against FIELD_RULES and return the normalized
    document (without _id or timestamps).

    Every rule is evaluated so that the error lists all offending fields at
    once. Optional strings that end up empty after trimming are left out of
    the document.

    Raises:
        ValidationError: field is the first violated field, errors lists
                         each violation with its rule name
                         (required, type, integer, min, date)
    """
    document: Dict[str, Any] = {}
    errors: List[Dict[str, str]] = []

    for rule in FIELD_RULES:
        raw = candidate.get(rule.name)
        value = None
        if raw is not None:
            try:
                value = _cast(rule, raw)
            except _CastFailure as failure:
                errors.append(_violation(rule.name, failure.rule, failure.message))
                continue

        if isinstance(value, str):
            if rule.trim:
                value = value.strip()
            if rule.lowercase:
                value = value.lower()
            if value == "":
                value = None

        if value is None:
            if rule.required:
                errors.append(_violation(rule.name, "required", f"{rule.name} is required"))
            continue

        if rule.min_value is not None and value < rule.min_value:
            errors.append(
                _violation(
                    rule.name,
                    "min",
                    f"{rule.name} must be greater than or equal to {rule.min_value}",
                )
            )
            continue

        document[rule.name] = value

    if errors:
        raise ValidationError(
            message="; ".join(error["message"] for error in errors),
            field=errors[0]["field"],
            errors=errors,
        )

    return document
