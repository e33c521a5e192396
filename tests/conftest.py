import datetime

import pytest
from PySide6.QtCore import QCoreApplication

from LampTimer.core.stages import Stage, StageCatalog


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def two_stage_catalog() -> StageCatalog:
    return StageCatalog([
        Stage("L", "L", "List", 3, "Compile a list"),
        Stage("A", "A", "Alumni", 2, "Identify Alumni"),
    ])


class FakeClock:
    def __init__(self, day: datetime.date) -> None:
        self.day = day

    def __call__(self) -> datetime.date:
        return self.day

    def advance(self, days: int = 1) -> None:
        self.day += datetime.timedelta(days=days)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime.date(2025, 3, 10))

