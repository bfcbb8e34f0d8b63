"""pytest configuration and fixtures for pyqt-formstate tests."""

import os

import pytest
from pydantic import BaseModel, field_validator

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_form_config():
    """Every test starts from the built-in FormStateConfig."""
    from pyqt_formstate.protocols import set_form_config
    set_form_config(None)
    yield
    set_form_config(None)


class SignupForm(BaseModel):
    email: str = ""
    age: int = 0

    @field_validator("email")
    @classmethod
    def email_required(cls, value: str) -> str:
        if not value:
            raise ValueError("required")
        return value

    @field_validator("age")
    @classmethod
    def adult(cls, value: int) -> int:
        if value < 18:
            raise ValueError("must be ≥ 18")
        return value


@pytest.fixture
def signup_schema():
    return SignupForm


@pytest.fixture
def bus():
    """Fresh bus per test; never the process-wide instance."""
    from pyqt_formstate.services import RefreshSignalBus
    return RefreshSignalBus()
