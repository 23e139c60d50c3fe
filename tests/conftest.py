# tests/conftest.py

import json
import os
import tempfile

import pytest

from models.gradebook import Gradebook
from models.student import Student


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def data_path(temp_dir):
    return os.path.join(temp_dir, "students.json")


@pytest.fixture
def sample_gradebook(data_path):
    return Gradebook(data_path)


@pytest.fixture
def sample_student():
    return Student("s001", "Sean Cameron", "THTR 274A")


@pytest.fixture
def graded_student():
    student = Student("s002", "Paul Atreides", "THTR 274A")
    student.add_grade("Math", 80)
    student.add_grade("History", 70)
    return student


@pytest.fixture
def ranked_gradebook(sample_gradebook):
    gb = sample_gradebook
    averages = {"s001": 90, "s002": 60, "s003": 85, "s004": None, "s005": 70}

    for student_id, average in averages.items():
        student = Student(student_id, f"Student {student_id}", "X")
        if average is not None:
            student.add_grade("Math", average)
        gb.add_student(student)

    return gb


@pytest.fixture
def write_data_file(data_path):
    def write(content):
        with open(data_path, "w", encoding="utf-8") as f:
            if isinstance(content, str):
                f.write(content)
            else:
                json.dump(content, f)
        return data_path

    return write
