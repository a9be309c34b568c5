# pickeasy/validation.py
"""Field validation chains.

A chain is declared per request field and runs its steps in order, e.g.::

    body("username").trim().is_alphanumeric().is_length(3, 20).escape()

Sanitizers transform the value, validators check it. A chain stops at its first
failing validator. ``validate_fields`` runs a list of chains against the request's
field mappings and either returns the sanitized values or raises ``ValidationError``
listing every failing field.
"""
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from fastapi import Request

from pickeasy.errors import ValidationError
from pickeasy.utils.ids import is_object_id


class _Missing:
    def __repr__(self):
        return "MISSING"


MISSING = _Missing()

_ALPHA = re.compile(r"^[A-Za-z]+$")
_ALPHANUMERIC = re.compile(r"^[A-Za-z0-9]+$")
_INT = re.compile(r"^[+-]?\d+$")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_ESCAPES = str.maketrans({
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
})


def _as_str(value: Any) -> str:
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class FieldChain:
    def __init__(self, location: str, field: str, hide_value: bool = False):
        self.location = location
        self.field = field
        self.hide_value = hide_value
        # (kind, fn, message) where kind is "sanitize" or "validate"
        self._steps: List[Tuple[str, Callable[[Any], Any], Optional[str]]] = []

    def __repr__(self):
        return f"<FieldChain {self.location}.{self.field} steps={len(self._steps)}>"

    def _sanitizer(self, fn):
        self._steps.append(("sanitize", fn, None))
        return self

    def _validator(self, fn, message):
        self._steps.append(("validate", fn, message))
        return self

    # ---- sanitizers ----
    def trim(self):
        return self._sanitizer(lambda v: v if v is MISSING else _as_str(v).strip())

    def escape(self):
        return self._sanitizer(lambda v: v if v is MISSING else _as_str(v).translate(_ESCAPES))

    def to_boolean(self, strict: bool = True):
        def convert(v):
            text = _as_str(v)
            if strict:
                return text in ("1", "true")
            return text not in ("0", "false", "")
        return self._sanitizer(convert)

    def to_int(self):
        def convert(v):
            if isinstance(v, int) and not isinstance(v, bool):
                return v
            match = _LEADING_INT.match(_as_str(v))
            return int(match.group(1)) if match else None
        return self._sanitizer(convert)

    # ---- validators ----
    def exists(self, check_null: bool = False, check_falsy: bool = False):
        def check(v):
            if v is MISSING:
                return False
            if check_null and v is None:
                return False
            if check_falsy and not v:
                return False
            return True
        return self._validator(check, "Field is required")

    def is_alpha(self):
        return self._validator(lambda v: bool(_ALPHA.match(_as_str(v))), "Must contain only letters")

    def is_alphanumeric(self):
        return self._validator(
            lambda v: bool(_ALPHANUMERIC.match(_as_str(v))), "Must contain only letters and numbers"
        )

    def is_length(self, min: int = 0, max: Optional[int] = None):
        def check(v):
            n = len(_as_str(v))
            return n >= min and (max is None or n <= max)
        if max is None:
            message = f"Must be at least {min} characters long"
        else:
            message = f"Must be between {min} and {max} characters long"
        return self._validator(check, message)

    def is_int(self, min: Optional[int] = None, max: Optional[int] = None):
        def check(v):
            if isinstance(v, bool) or v is None or v is MISSING:
                return False
            if not isinstance(v, int):
                text = _as_str(v).strip()
                if not _INT.match(text):
                    return False
                v = int(text)
            return (min is None or v >= min) and (max is None or v <= max)
        if min is not None and max is not None:
            message = f"Must be an integer between {min} and {max}"
        else:
            message = "Must be an integer"
        return self._validator(check, message)

    def is_in(self, choices: Iterable[str]):
        allowed = tuple(choices)
        return self._validator(
            lambda v: _as_str(v) in allowed, "Must be one of: " + ", ".join(allowed)
        )

    def is_object_id(self):
        return self._validator(lambda v: is_object_id(_as_str(v)), "Must be a valid identifier")

    def run(self, value: Any) -> Tuple[Any, Optional[str]]:
        """Apply the steps to ``value``; return ``(value, None)`` or ``(original, message)``."""
        current = value
        for kind, fn, message in self._steps:
            if kind == "sanitize":
                current = fn(current)
            elif not fn(current):
                return value, message
        return current, None


def body(field: str, hide_value: bool = False) -> FieldChain:
    return FieldChain("body", field, hide_value=hide_value)


def param(field: str) -> FieldChain:
    return FieldChain("param", field)


def validate_fields(
    sources: Mapping[str, Mapping[str, Any]],
    chains: Iterable[FieldChain],
    report_all: bool = True,
) -> Dict[str, Any]:
    """Run ``chains`` over ``sources`` (location -> field mapping)."""
    values: Dict[str, Any] = {}
    errors: List[Dict[str, Any]] = []

    for chain in chains:
        raw = sources.get(chain.location, {}).get(chain.field, MISSING)
        result, message = chain.run(raw)
        if message is not None:
            errors.append({
                "location": chain.location,
                "field": chain.field,
                "msg": message,
                "value": None if (raw is MISSING or chain.hide_value) else raw,
            })
            if not report_all:
                break
            continue
        if result is not MISSING:
            values[chain.field] = result

    if errors:
        raise ValidationError(errors)
    return values


async def read_body_fields(request: Request) -> Dict[str, Any]:
    """Return the non-file body fields from a JSON, urlencoded or multipart request."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        fields: Dict[str, Any] = {}
        for key, value in form.multi_items():
            if isinstance(value, str):
                fields.setdefault(key, value)
        return fields

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError([
            {"location": "body", "field": None, "msg": "Malformed JSON body", "value": None}
        ])
    return data if isinstance(data, dict) else {}


def validate_request(*chains: FieldChain):
    """Build a dependency that validates the request body and path params against ``chains``."""

    async def dependency(request: Request) -> Dict[str, Any]:
        settings = request.app.state.settings
        sources = {
            "body": await read_body_fields(request),
            "param": dict(request.path_params),
        }
        return validate_fields(sources, chains, report_all=settings.VALIDATION_REPORT_ALL)

    return dependency
