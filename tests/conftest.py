"""Shared fixtures: demo records, a pinned calendar date and a clean Flask session.

Tenure-driven rules depend on the wall-clock year, so engine tests pass
``TODAY`` explicitly instead of relying on ``date.today()``.
"""

from __future__ import annotations

from datetime import date

import pytest

import app as app_module
from engines import data_loader

TODAY = date(2025, 6, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def senior_range() -> dict:
    return {
        "jobTitle": "Senior Software Engineer", "jobFamily": "Technology",
        "jobSubFamily": "Software Development", "level": "4",
        "minSalary": 2_000_000, "midSalary": 2_500_000, "maxSalary": 3_000_000,
        "variablePercentage": 12,
    }


@pytest.fixture
def staff_range() -> dict:
    return {
        "jobTitle": "Staff Software Engineer", "jobFamily": "Technology",
        "jobSubFamily": "Software Development", "level": "5",
        "minSalary": 2_800_000, "midSalary": 3_000_000, "maxSalary": 4_200_000,
        "variablePercentage": 15,
    }


@pytest.fixture
def engineer() -> dict:
    """Engineering, level 4, hired 2021 (4 years at TODAY), compa-ratio 80."""
    return {
        "id": "e1", "name": "Test Engineer", "email": "test.engineer@company.com",
        "department": "Engineering", "jobTitle": "Senior Software Engineer",
        "jobFamily": "Technology", "jobSubFamily": "Software Development", "level": "4",
        "currentSalary": 2_000_000, "variablePay": 200_000, "variablePercentage": 10,
        "ctc": 2_200_000, "hireDate": "2021-03-15",
    }


@pytest.fixture
def designer() -> dict:
    """Design, level 3, hired 2024 (1 year at TODAY)."""
    return {
        "id": "d1", "name": "Test Designer", "email": "test.designer@company.com",
        "department": "Design", "jobTitle": "UX Designer",
        "jobFamily": "Design", "jobSubFamily": "User Experience", "level": "3",
        "currentSalary": 1_600_000, "variablePay": 160_000, "variablePercentage": 10,
        "ctc": 1_760_000, "hireDate": "2024-01-10",
    }


@pytest.fixture
def designer_range() -> dict:
    return {
        "jobTitle": "UX Designer", "jobFamily": "Design", "jobSubFamily": "User Experience",
        "level": "3", "minSalary": 1_200_000, "midSalary": 1_600_000, "maxSalary": 2_000_000,
        "variablePercentage": 10,
    }


@pytest.fixture
def offer_40pct() -> dict:
    """Competing offer 40% above the engineer's 2.2M CTC."""
    return {"basePay": 2_800_000, "variablePay": 280_000, "ctc": 3_080_000}


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Flask test client over the demo directory with a fresh session."""
    monkeypatch.setattr(data_loader, "DATA_DIR", str(tmp_path))
    app_module.STATE.update({"loaded": False, "_load_error": None, "data": None})
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c
    app_module.STATE.update({"loaded": False, "_load_error": None, "data": None})
