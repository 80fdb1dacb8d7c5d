"""Declarative field rules for request payloads.

A rule binds a source mapping to a field name and is only evaluated when
``check`` runs. Evaluation never raises: a rule either passes or reports a
failing ``RuleResult``.

    verdict = check([required(body, "email"), required(body, "amount")])
    if not verdict.passed:
        ...
"""
from __future__ import annotations

import math
from typing import Any, Callable, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

_MISSING = object()


class RuleResult(BaseModel):
    field: str
    rule: str
    passed: bool
    message: Optional[str] = None


class Verdict(BaseModel):
    passed: bool = Field(serialization_alias="pass")
    result: List[RuleResult]

    def failures(self) -> List[RuleResult]:
        return [r for r in self.result if not r.passed]


class Rule:
    """A lazily evaluated check of one field in one source mapping."""

    def __init__(
        self,
        source: Optional[Mapping[str, Any]],
        field: str,
        kind: str,
        predicate: Callable[[Any], bool],
        message: str,
    ) -> None:
        self.source = source
        self.field = field
        self.kind = kind
        self._predicate = predicate
        self._message = message

    def evaluate(self) -> RuleResult:
        value = _lookup(self.source, self.field)
        try:
            ok = bool(self._predicate(value))
        except Exception:  # noqa: BLE001 a broken predicate counts as a failure
            ok = False
        return RuleResult(
            field=self.field,
            rule=self.kind,
            passed=ok,
            message=None if ok else self._message.format(field=self.field),
        )


def _lookup(source: Optional[Mapping[str, Any]], field: str) -> Any:
    if source is None:
        return _MISSING
    try:
        return source.get(field, _MISSING)
    except AttributeError:
        return _MISSING


def _is_present(value: Any) -> bool:
    if value is _MISSING or value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return True


def _is_numeric(value: Any) -> bool:
    # absence is reported by ``required``
    if value is _MISSING or value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value))
        except ValueError:
            return False
    return False


def _is_string(value: Any) -> bool:
    if value is _MISSING or value is None:
        return True
    return isinstance(value, str)


def required(source: Optional[Mapping[str, Any]], field: str) -> Rule:
    """Field must be present and non-empty. ``0`` and ``False`` are present."""
    return Rule(source, field, "required", _is_present, "{field} is required")


def numeric(source: Optional[Mapping[str, Any]], field: str) -> Rule:
    return Rule(source, field, "numeric", _is_numeric, "{field} must be a number")


def string(source: Optional[Mapping[str, Any]], field: str) -> Rule:
    return Rule(source, field, "string", _is_string, "{field} must be a string")


def check(rules: Sequence[Rule]) -> Verdict:
    results = [rule.evaluate() for rule in rules]
    return Verdict(passed=all(r.passed for r in results), result=results)
