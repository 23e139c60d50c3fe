# models/gradebook.py

"""
The Gradebook model is the central data object of the program and represents the "source of truth" for all student records.

Students are stored in an insertion-ordered dictionary keyed by student ID and written to a single .json file upon saving,
as a flat list of serialized students. The Gradebook is the sole owner of its `Student` objects; lookups hand out
references, but records only enter or leave the collection through Gradebook methods.

Provides functions for loading the collection from disk and saving it back, adding, removing, finding, and updating
students, and read-only aggregate views (top performers and per-class statistics).
Includes session-scoped attributes like path (current save location) and unsaved_changes (unsaved mutations to records).

Loading applies a reset-on-corruption policy: a data file that cannot be parsed is discarded and replaced with an
empty one rather than aborting the program. This is intentional data loss and is logged as a warning.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterator
from typing import Any

from core.errors import (
    DuplicateKeyError,
    NotFoundError,
    StorageIOError,
    ValidationError,
)
from core.path_utils import ensure_parent_dir, resolve_data_path
from core.utils import mean, round_half_up
from models.student import GradeStatus, Student

logger = logging.getLogger("gradebook.store")

UPDATABLE_FIELDS = ("name", "class_name")


class Gradebook:

    def __init__(self, path: str | None = None):
        self._students: dict[str, Student] = {}
        # _path uses property setter
        self.path = path
        self._unsaved_changes: bool = False

    # === properties ===

    # --- core data structures ---

    @property
    def students(self) -> dict[str, Student]:
        return self._students.copy()

    @property
    def student_count(self) -> int:
        return len(self._students)

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, path: str | None) -> None:
        self._path = resolve_data_path(path)

    # --- status markers ---

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved_changes

    # === persistence and import ===

    def load(self, path: str | None = None) -> None:
        """
        Replaces the in-memory collection with the students stored on disk.

        Args:
            path (str | None):
                - The data file to read.
                - If no argument is provided, `self.path` will be used by default.

        Raises:
            - StorageIOError:
                - If the file exists but cannot be read (e.g. permission denied, or the path is a directory).
                - If a recovery save (see Notes) cannot be written.
            - ValidationError:
                - If the file holds a list, but an entry is not a valid serialized `Student`.
            - DuplicateKeyError:
                - If two entries in the file share an ID.

        Notes:
            - A missing file is not an error: the gradebook starts empty and an empty file is written immediately.
            - An empty or whitespace-only file is not an error: the gradebook starts empty and nothing is written.
            - Malformed content (invalid JSON, undecodable bytes, or anything other than a top-level list) is treated
              as corruption: the content is discarded, the gradebook starts empty, and the file is overwritten with an
              empty list.
            - On `StorageIOError` from reading, `ValidationError`, or `DuplicateKeyError`, the in-memory state is left
              untouched.
        """
        path = self.path if path is None else path

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = f.read()

        except FileNotFoundError:
            logger.info("Data file %s not found, creating a new one.", path)
            self._reset()
            self.save(path)
            return

        except UnicodeDecodeError as e:
            self._reset_on_corruption(path, e)
            return

        except OSError as e:
            logger.error("Failed to read data file %s: %s", path, e)
            raise StorageIOError(f"Failed to read data from disk: {e}") from e

        if not raw.strip():
            logger.info("Data file %s is empty, starting with no students.", path)
            self._reset()
            return

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            self._reset_on_corruption(path, e)
            return

        if not isinstance(data, list):
            self._reset_on_corruption(
                path, ValueError(f"expected a list, got {type(data).__name__}")
            )
            return

        self._students = self._import_students(data)
        self._unsaved_changes = False

        logger.info("Loaded %d student(s) from %s.", len(self._students), path)

    def save(self, path: str | None = None) -> None:
        """
        Serializes all students to disk in JSON format, in insertion order.

        Args:
            path (str | None):
                - The data file to write.
                - If no argument is provided, `self.path` will be used by default.

        Raises:
            StorageIOError: If the parent directory cannot be created or the file cannot be written.

        Notes:
            - Missing parent directories are created.
            - Data is written to a temporary file in the target directory, which then replaces the target file,
              so a failed write never leaves a truncated data file behind.
            - This intentionally overwrites existing data.
            - In-memory state is unaffected whether or not the save succeeds; only the unsaved-changes flag is
              cleared on success.
        """
        path = self.path if path is None else path
        data = [student.to_dict() for student in self._students.values()]

        try:
            ensure_parent_dir(path)
            self._write_json(path, data)

        except OSError as e:
            logger.error("Failed to write data file %s: %s", path, e)
            raise StorageIOError(f"Failed to write data to disk: {e}") from e

        self._unsaved_changes = False

        logger.info("Saved %d student(s) to %s.", len(data), path)

    def _import_students(self, data: list[Any]) -> dict[str, Student]:
        """
        Deserializes a list of student records into a fresh dictionary, failing fast on error.

        Args:
            data (list[Any]): A list of dictionaries representing serialized students.

        Returns:
            A new insertion-ordered dictionary of `Student` objects keyed by ID.

        Raises:
            - ValidationError: If any entry fails `Student.from_dict()`.
            - DuplicateKeyError: If two entries share an ID.

        Notes:
            - Does not touch `self._students`; the caller swaps the result in only once every entry is imported.
        """
        students: dict[str, Student] = {}

        for record_dict in data:
            try:
                student = Student.from_dict(record_dict)
            except ValidationError as e:
                raise ValidationError(
                    f"Failed to deserialize student: {record_dict} - {e}"
                ) from e

            if student.id in students:
                raise DuplicateKeyError(
                    f"Failed to import student: ID '{student.id}' appears more than once."
                )

            students[student.id] = student

        return students

    def _reset_on_corruption(self, path: str, error: Exception) -> None:
        logger.warning(
            "Data file %s is corrupt (%s); discarding its contents and starting with no students.",
            path,
            error,
        )
        self._reset()
        self.save(path)

    def _reset(self) -> None:
        self._students = {}
        self._unsaved_changes = False

    @staticmethod
    def _write_json(path: str, data: list) -> None:
        directory = os.path.dirname(os.path.abspath(path))
        fd, temp_path = tempfile.mkstemp(
            dir=directory, prefix=".students-", suffix=".tmp"
        )

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, path)

        except Exception:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    # === data accessors ===

    def find_student(self, student_id: str) -> Student | None:
        """
        Looks up a student by ID.

        Returns:
            The matching `Student`, or None if no student has this ID.
        """
        return self._students.get(student_id)

    def list_students(self) -> list[Student]:
        return list(self._students.values())

    def top_students(self, n: int = 3) -> list[Student]:
        """
        Returns the highest-averaging students who have at least one grade.

        Args:
            n (int): The maximum number of students to return. Defaults to 3.

        Returns:
            Up to `n` students sorted by average, highest first. Students with equal averages keep their insertion
            order. If fewer than `n` students have grades, all of them are returned.

        Raises:
            ValidationError: If `n` is not a non-negative integer.
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValidationError("Number of students must be a non-negative integer.")

        graded = [student for student in self._students.values() if student.has_grades]
        graded.sort(key=lambda student: student.average, reverse=True)

        return graded[:n]

    def class_statistics(self) -> dict[str, dict[str, Any]]:
        """
        Groups students by class name and summarizes each group.

        Returns:
            A dictionary keyed by class name, in order of first appearance, where each value holds:
                - "count" (int): Number of students in the class.
                - "average" (float): Mean of the students' averages, rounded to 2 decimals.
                - "passed" (int): Number of students with a passing status.
                - "failed" (int): Number of students with a failing status.

        Notes:
            - Students without grades count toward the class with an average of 0 and a failing status.
            - Only classes with at least one student appear.
        """
        groups: dict[str, list[Student]] = {}
        for student in self._students.values():
            groups.setdefault(student.class_name, []).append(student)

        statistics = {}
        for class_name, members in groups.items():
            passed = sum(1 for s in members if s.status == GradeStatus.PASS)
            statistics[class_name] = {
                "count": len(members),
                "average": round_half_up(mean([s.average for s in members])),
                "passed": passed,
                "failed": len(members) - passed,
            }

        return statistics

    # === data manipulators ===

    def _mark_dirty(self) -> None:
        self._unsaved_changes = True

    def _require_student(self, student_id: str) -> Student:
        student = self._students.get(student_id)
        if student is None:
            raise NotFoundError(f"Student with ID {student_id} not found.")
        return student

    # --- student manipulation ---

    def add_student(self, student: Student) -> str:
        """
        Adds a `Student` object to the gradebook.

        Args:
            student (Student): The `Student` object to be added.

        Returns:
            A confirmation message.

        Raises:
            - ValidationError: If `student` is not a `Student` instance.
            - DuplicateKeyError: If a student with the same ID already exists; the existing student is unaffected.

        Notes:
            - This method mutates `Gradebook` state and calls `_mark_dirty()` if successful.
        """
        if not isinstance(student, Student):
            raise ValidationError("Only Student objects can be added to the gradebook.")

        self.require_unique_student_id(student.id)

        self._students[student.id] = student
        self._mark_dirty()

        return f"Student {student.name} added successfully"

    def remove_student(self, student_id: str) -> str:
        """
        Removes the student with the given ID from the gradebook.

        Returns:
            The removed student's name.

        Raises:
            NotFoundError: If no student has this ID.

        Notes:
            - This method mutates `Gradebook` state and calls `_mark_dirty()` if successful.
        """
        student = self._require_student(student_id)

        del self._students[student_id]
        self._mark_dirty()

        return student.name

    def update_student(self, student_id: str, changes: dict[str, Any]) -> str:
        """
        Updates the name and/or class name of an existing student.

        Args:
            student_id (str): The ID of the student to update.
            changes (dict[str, Any]): New values keyed by field. Allowed keys are "name" and "class_name"; a value of
                None means the field is left unchanged.

        Returns:
            A confirmation message.

        Raises:
            - NotFoundError: If no student has this ID.
            - ValidationError:
                - If `changes` is not a dictionary or contains a key other than "name" or "class_name".
                - If a provided value fails `Student` validation.

        Notes:
            - All provided values are validated before any is applied, so a rejected update leaves the student
              unchanged.
            - This method calls `_mark_dirty()` if at least one field was provided.
        """
        student = self._require_student(student_id)

        if not isinstance(changes, dict):
            raise ValidationError("Updates must be provided as a dictionary.")

        unknown = [key for key in changes if key not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(
                f"Only name and class_name can be updated, got: {', '.join(map(str, unknown))}."
            )

        name = changes.get("name")
        class_name = changes.get("class_name")

        if name is not None:
            Student.validate_text_input(name, "Name")
        if class_name is not None:
            Student.validate_text_input(class_name, "Class name")

        if name is not None:
            student.name = name
        if class_name is not None:
            student.class_name = class_name

        if name is not None or class_name is not None:
            self._mark_dirty()

        return f"Student {student_id} updated successfully"

    def add_grade(self, student_id: str, subject: str, score: Any) -> str:
        """
        Records a grade for the student with the given ID.

        Returns:
            The confirmation message from `Student.add_grade()`.

        Raises:
            - NotFoundError: If no student has this ID.
            - ValidationError: If the subject or score is invalid.

        Notes:
            - A second grade for the same subject replaces the first.
            - This method calls `_mark_dirty()` if successful.
        """
        student = self._require_student(student_id)

        message = student.add_grade(subject, score)
        self._mark_dirty()

        return message

    # === data validators ===

    def require_unique_student_id(self, student_id: str) -> None:
        """
        Validates that no existing student shares the given ID.

        Raises:
            DuplicateKeyError: If a student with the same ID already exists.
        """
        if student_id in self._students:
            raise DuplicateKeyError(f"Student with ID {student_id} already exists.")

    # === dunder methods ===

    def __len__(self) -> int:
        return len(self._students)

    def __iter__(self) -> Iterator[Student]:
        return iter(list(self._students.values()))

    def __contains__(self, student_id: object) -> bool:
        return student_id in self._students

    def __repr__(self) -> str:
        return f"Gradebook({self._path}, {len(self._students)} students)"
