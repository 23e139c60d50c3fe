# models/student.py

"""
Represents a student and the grades they have earned.

Stores identifying information (a unique ID, a name, and a class name) alongside a
mapping of subject names to scores.

Includes functionality for:
- Validating name, class name, subject, and score input
- Recording grades, where a second grade for the same subject replaces the first
- Deriving the average score and pass/fail status on demand
- Serializing to and from JSON-compatible dictionaries

The average is never stored. It is recomputed from the grades each time it is read and
rounded half-up to two decimal places; a student without grades averages 0.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from core.errors import ValidationError
from core.utils import mean, round_half_up

PASSING_AVERAGE = 75


class GradeStatus(str, Enum):
    PASS = "Pass"
    FAIL = "Fail"


class Student:

    def __init__(self, id: str, name: str, class_name: str):
        self._id: str = Student.validate_id_input(id)
        self._name: str = Student.validate_text_input(name, "Name")
        self._class_name: str = Student.validate_text_input(class_name, "Class name")
        self._grades: dict[str, int | float] = {}

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = Student.validate_text_input(name, "Name")

    @property
    def class_name(self) -> str:
        return self._class_name

    @class_name.setter
    def class_name(self, class_name: str) -> None:
        self._class_name = Student.validate_text_input(class_name, "Class name")

    @property
    def grades(self) -> dict[str, int | float]:
        return self._grades.copy()

    @property
    def has_grades(self) -> bool:
        return bool(self._grades)

    @property
    def average(self) -> float:
        if not self._grades:
            return 0.0

        return round_half_up(mean(list(self._grades.values())))

    @property
    def status(self) -> GradeStatus:
        return (
            GradeStatus.PASS if self.average >= PASSING_AVERAGE else GradeStatus.FAIL
        )

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "name": self._name,
            "className": self._class_name,
            "grades": dict(self._grades),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Student:
        """
        Rebuilds a `Student` from its serialized form.

        Every grade is replayed through `add_grade()`, so invalid stored data is rejected
        the same way invalid user input is.

        Raises:
            ValidationError: If `data` is not a dictionary, a field is missing or invalid,
                or any stored grade fails validation.
        """
        if not isinstance(data, dict):
            raise ValidationError(
                f"Student data must be a dictionary, got {type(data).__name__}."
            )

        student = cls(
            id=data.get("id"),
            name=data.get("name"),
            class_name=data.get("className"),
        )

        grades = data.get("grades") or {}
        if not isinstance(grades, dict):
            raise ValidationError("Grades must be a mapping of subject to score.")

        for subject, score in grades.items():
            student.add_grade(subject, score)

        return student

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Student):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Student({self._id}, {self._name}, {self._class_name}, {self._grades})"

    def __str__(self) -> str:
        return f"STUDENT: name: {self._name}, class: {self._class_name}, id: {self._id}"

    # === data manipulators ===

    def add_grade(self, subject: str, score: Any) -> str:
        subject = Student.validate_subject_input(subject)
        score = Student.validate_score_input(score)

        self._grades[subject] = score
        return f"Grade {score} for {subject} added successfully"

    # === data validators ===

    @staticmethod
    def validate_id_input(id: Any) -> str:
        if not isinstance(id, str) or not id:
            raise ValidationError("ID must be a non-empty string.")
        return id

    @staticmethod
    def validate_text_input(value: Any, field_name: str) -> str:
        """
        Validates a required text field such as a name or class name.

        Args:
            value (Any): The input value to validate.
            field_name (str): A human-readable field name used in error messages.

        Returns:
            The value unchanged if valid.

        Raises:
            ValidationError: If the value is not a string, is empty, or contains only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{field_name} must be a non-empty string.")
        return value

    @staticmethod
    def validate_subject_input(subject: Any) -> str:
        if not isinstance(subject, str) or not subject.strip():
            raise ValidationError("Subject must be a non-empty string.")
        return subject

    @staticmethod
    def validate_score_input(score: Any) -> int | float:
        """
        Validates a grade score.

        Ensures the score:
            - Is an int or float (booleans and numeric strings are rejected)
            - Is finite
            - Is between 0 and 100, inclusive

        Args:
            score (Any): The input value to validate.

        Returns:
            The score unchanged if valid.

        Raises:
            ValidationError: If the score is not a number or is out of bounds.
        """
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValidationError("Score must be a number between 0 and 100.")

        if isinstance(score, float) and not math.isfinite(score):
            raise ValidationError("Score must be a finite number.")

        if score < 0 or score > 100:
            raise ValidationError("Score must be a number between 0 and 100.")

        return score
