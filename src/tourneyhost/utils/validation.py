"""Validation utilities for Tourney Host.

This module provides reusable validation functions with consistent error handling.
Each ``validate_*`` function returns a :class:`ValidationResult`; :func:`require`
turns a failed result into a :class:`~tourneyhost.exceptions.ValidationError`.
"""

from typing import Any, Iterable, Mapping, Optional

from tourneyhost.exceptions import ValidationError


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


def require(result: ValidationResult, error_cls: type = ValidationError) -> Any:
    """Return the sanitized value of a valid result, raise ``error_cls`` otherwise.

    Example:
        >>> name = require(validate_non_empty("  Spring Open ", "Tournament name"))
        >>> name
        'Spring Open'
    """
    if not result:
        raise error_cls(result.error_message)
    return result.sanitized_value


# ========== Generic Validation ==========


def validate_non_empty(
    value: Optional[str], field_name: str = "Field"
) -> ValidationResult:
    """Validate that a field is not empty.

    Args:
        value: Value to validate
        field_name: Name of the field for error messages

    Returns:
        ValidationResult with validation status
    """
    if not value or not str(value).strip():
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} cannot be empty",
        )
    return ValidationResult(is_valid=True, sanitized_value=str(value).strip())


def validate_positive_integer(
    value: Any, field_name: str = "Value"
) -> ValidationResult:
    """Validate that a value is a positive integer.

    Booleans are rejected even though ``bool`` subclasses ``int``.

    Args:
        value: Value to validate
        field_name: Name of the field for error messages

    Returns:
        ValidationResult with validation status
    """
    if value is None:
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} is required",
        )
    if isinstance(value, bool) or not isinstance(value, int):
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be an integer: {value!r}",
        )
    if value <= 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be positive",
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


def validate_non_negative_integer(
    value: Any, field_name: str = "Value"
) -> ValidationResult:
    """Validate that a value is an integer greater than or equal to zero."""
    if isinstance(value, bool) or not isinstance(value, int):
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be an integer: {value!r}",
        )
    if value < 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} cannot be negative",
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


# ========== Result Validation ==========


def validate_game_score(score_a: Any, score_b: Any) -> ValidationResult:
    """Validate the two scores of a single game.

    Args:
        score_a: Score of the participant in slot A
        score_b: Score of the participant in slot B

    Returns:
        ValidationResult whose sanitized value is the ``(score_a, score_b)`` tuple
    """
    for label, score in (("Score A", score_a), ("Score B", score_b)):
        result = validate_non_negative_integer(score, label)
        if not result:
            return result
    return ValidationResult(is_valid=True, sanitized_value=(score_a, score_b))


# ========== Seeding Validation ==========


def validate_seed_map(
    seeds: Mapping[str, Any], participant_ids: Iterable[str]
) -> ValidationResult:
    """Validate a participant -> seed mapping against the entrant list.

    Seeds must be positive, unique, no larger than the number of entrants, and
    may only reference entrants.

    Returns:
        ValidationResult whose sanitized value is a plain ``dict`` copy
    """
    entrants = set(participant_ids)
    seen = {}
    for participant_id, seed in seeds.items():
        if participant_id not in entrants:
            return ValidationResult(
                is_valid=False,
                error_message=f"Seeded participant {participant_id} is not entered",
            )
        result = validate_positive_integer(seed, f"Seed for {participant_id}")
        if not result:
            return result
        if seed > len(entrants):
            return ValidationResult(
                is_valid=False,
                error_message=(
                    f"Seed {seed} exceeds the number of participants ({len(entrants)})"
                ),
            )
        if seed in seen:
            return ValidationResult(
                is_valid=False,
                error_message=(
                    f"Seed {seed} assigned to both {seen[seed]} and {participant_id}"
                ),
            )
        seen[seed] = participant_id
    return ValidationResult(is_valid=True, sanitized_value=dict(seeds))


# ========== Points Validation ==========


def validate_placement_label(label: Any) -> ValidationResult:
    """A placement label is the decimal text of a positive place ("1", "5")."""
    if not isinstance(label, str) or not label.isdigit() or int(label) < 1:
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid placement label: {label!r}",
        )
    return ValidationResult(is_valid=True, sanitized_value=str(int(label)))


def validate_points_table(points: Mapping[Any, Any]) -> ValidationResult:
    """Validate a placement label -> points mapping.

    Returns:
        ValidationResult whose sanitized value is the normalized ``dict``
    """
    table = {}
    for label, value in points.items():
        label_result = validate_placement_label(label)
        if not label_result:
            return label_result
        points_result = validate_non_negative_integer(
            value, f"Points for placement {label}"
        )
        if not points_result:
            return points_result
        table[label_result.sanitized_value] = value
    return ValidationResult(is_valid=True, sanitized_value=table)
