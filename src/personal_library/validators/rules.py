"""
Declarative DTO validation.

A DTO type owns a fixed, ordered table of `ValidationRule`s built at import time.
`Validator.validate` interprets the table against one DTO and returns a
ViolationSet: wire field name -> messages, in rule order. Every activated rule on
every field is evaluated; nothing short-circuits, so a client sees all problems at once.

    validator = Validator([
        ValidationRule("title", not_empty, "Title is required."),
        ValidationRule("isbn", max_length(20), "ISBN must not exceed 20 characters.",
                       when=when_present("isbn")),
    ])
    validator.validate(dto)   # {} when valid
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from pydantic import BaseModel

from personal_library.exceptions.base import ValidationFailedError

logger = logging.getLogger(__name__)

ViolationSet = dict[str, list[str]]
Predicate = Callable[[Any], bool]
# Activation conditions see the whole DTO (as a wire-keyed mapping), so they may depend on sibling fields.
Condition = Callable[[Mapping[str, Any]], bool]


def always(values: Mapping[str, Any]) -> bool:
    return True


def when_present(field_name: str) -> Condition:
    def _condition(values: Mapping[str, Any]) -> bool:
        return values.get(field_name) is not None
    _condition.__name__ = f"when_present({field_name})"
    return _condition


# -----------------------
# Predicates
# -----------------------

def not_empty(value: Any) -> bool:
    """Fails for None, empty strings and whitespace-only strings."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def is_null(value: Any) -> bool:
    return value is None


def not_null(value: Any) -> bool:
    return value is not None


def max_length(limit: int) -> Predicate:
    # None passes; absence is reported by not_empty where a field is required.
    def _predicate(value: Any) -> bool:
        return value is None or len(value) <= limit
    return _predicate


def between(low: int, high: int) -> Predicate:
    def _predicate(value: Any) -> bool:
        return value is None or low <= value <= high
    return _predicate


def greater_than(bound: int) -> Predicate:
    def _predicate(value: Any) -> bool:
        return value is None or value > bound
    return _predicate


def is_in_enum(enum_cls: type[Enum]) -> Predicate:
    allowed = frozenset(member.value for member in enum_cls)

    def _predicate(value: Any) -> bool:
        if isinstance(value, enum_cls):
            return True
        return value in allowed
    return _predicate


# -----------------------
# Rules and interpreter
# -----------------------

@dataclass(frozen=True)
class ValidationRule:
    """One (field, activation, predicate, message) row of a rule table."""
    field: str
    predicate: Predicate
    message: str
    when: Condition = always


def _as_wire_mapping(dto: BaseModel | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(dto, BaseModel):
        # Keys as the client sent them: publishedYear, ownershipStatus, ...
        return dto.model_dump(by_alias=True)
    return dto


class Validator:
    """Interprets a static rule table. Holds no per-call state, so one instance serves all requests."""

    def __init__(self, rules: Iterable[ValidationRule], name: str = "validator"):
        self.rules: tuple[ValidationRule, ...] = tuple(rules)
        self.name = name

    def __repr__(self) -> str:
        return f"<Validator(name={self.name!r}, rules={len(self.rules)})>"

    def validate(self, dto: BaseModel | Mapping[str, Any]) -> ViolationSet:
        values = _as_wire_mapping(dto)
        violations: ViolationSet = {}
        for rule in self.rules:
            if not rule.when(values):
                continue
            if not rule.predicate(values.get(rule.field)):
                violations.setdefault(rule.field, []).append(rule.message)
        return violations

    def validate_or_raise(self, dto: BaseModel | Mapping[str, Any]) -> None:
        violations = self.validate(dto)
        if violations:
            logger.debug(
                "validation.failed",
                extra={"validator": self.name, "invalid_fields": sorted(violations)},
            )
            raise ValidationFailedError(violations)
