"""
Declarative request validation.

A route declares an ordered tuple of `Check`s over its path params and JSON
body. `ValidationChain` runs all of them (it never stops at the first
failure) and reports the failures in declaration order. `validate()` turns a
chain into a FastAPI dependency that raises `InputValidationError` when
anything failed, so the handler only ever runs on valid input.
"""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from fastapi import Request

from app.core.errors import InputValidationError

PARAMS = "params"
BODY = "body"

_MISSING = object()
_INT_RE = re.compile(r"[-+]?[0-9]+")
_NUMERIC_RE = re.compile(r"[-+]?([0-9]+\.?[0-9]*|\.[0-9]+)")
_BOOLEAN_STRINGS = {"true": True, "false": False, "1": True, "0": False}


# -------------------------
# Predicates
# -------------------------
def _as_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_int(value: Any) -> bool:
    return _INT_RE.fullmatch(_as_text(value)) is not None


def not_empty(value: Any) -> bool:
    return _as_text(value).strip() != ""


def is_text(value: Any) -> bool:
    # missing/null is not_empty's job
    return value is _MISSING or value is None or isinstance(value, str)


def max_length(limit: int) -> Callable[[Any], bool]:
    def _predicate(value: Any) -> bool:
        return not isinstance(value, str) or len(value.strip()) <= limit

    return _predicate


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        return _NUMERIC_RE.fullmatch(value.strip()) is not None
    return False


def greater_than(limit: float) -> Callable[[Any], bool]:
    def _predicate(value: Any) -> bool:
        if not is_numeric(value):
            return False
        if isinstance(value, str):
            value = float(value)
        return value > limit

    return _predicate


def is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    return isinstance(value, str) and value.strip().lower() in _BOOLEAN_STRINGS


# -------------------------
# Coercion (after validation)
# -------------------------
def to_int(value: Any) -> int:
    return int(_as_text(value))


def to_price(value: Any) -> float:
    return float(value)


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return _BOOLEAN_STRINGS[str(value).strip().lower()]


# -------------------------
# Chain
# -------------------------
@dataclass(frozen=True)
class Check:
    field: str
    location: str
    predicate: Callable[[Any], bool]
    message: str


@dataclass
class ValidatedInput:
    params: Dict[str, Any]
    body: Dict[str, Any]


class ValidationChain:
    def __init__(self, *checks: Check) -> None:
        self.checks = checks

    def collect(
        self,
        params: Mapping[str, Any],
        body: Mapping[str, Any],
        locations: Tuple[str, ...] = (PARAMS, BODY),
    ) -> List[Dict[str, Any]]:
        """Run every check (restricted to `locations`) and return one error record per failed check."""
        sources = {PARAMS: params, BODY: body}
        errors: List[Dict[str, Any]] = []
        for check in self.checks:
            if check.location not in locations:
                continue
            value = sources[check.location].get(check.field, _MISSING)
            if check.predicate(value):
                continue
            errors.append(
                {
                    "field": check.field,
                    "location": check.location,
                    "message": check.message,
                    "value": None if value is _MISSING else value,
                }
            )
        return errors


async def _read_json_object(request: Request) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """Return (body, error); a body that is not a JSON object yields ({}, error record)."""
    raw = await request.body()
    if not raw.strip():
        return {}, None
    try:
        payload = json.loads(raw)
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return {}, {
            "field": "body",
            "location": BODY,
            "message": "The request body must be a JSON object",
            "value": None,
        }
    return payload, None


def validate(*checks: Check):
    """
    Dependency factory attaching a validation chain to a route.

    Example:
        @router.get("/{id}")
        def http_get_product(id: str, _: ValidatedInput = Depends(validate(ID_CHECK))): ...
    """
    chain = ValidationChain(*checks)
    reads_body = any(c.location == BODY for c in checks)

    async def _dependency(request: Request) -> ValidatedInput:
        params = dict(request.path_params)
        body, body_error = await _read_json_object(request) if reads_body else ({}, None)
        if body_error is None:
            errors = chain.collect(params, body)
        else:
            # body unusable: param checks first, then the body error
            errors = chain.collect(params, body, locations=(PARAMS,)) + [body_error]
        if errors:
            raise InputValidationError(errors)
        return ValidatedInput(params=params, body=body)

    return _dependency
