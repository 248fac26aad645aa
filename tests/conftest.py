from __future__ import annotations

import copy
import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="woundcare-tests-")
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR}/woundcare.db"
os.environ["STORAGE_PATH"] = f"{_TEST_DIR}/uploads"
os.environ["ENABLE_OCR"] = "true"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from woundcare.database import SessionLocal, reset_db  # noqa: E402
from woundcare.main import app  # noqa: E402

from samples import VALID_FORM  # noqa: E402


@pytest.fixture(autouse=True)
def clean_db() -> None:
    reset_db()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def valid_form() -> dict:
    return copy.deepcopy(VALID_FORM)
