import pytest

from LampTimer.core.errors import UnknownStage
from LampTimer.core.stages import StageCatalog, default_catalog
from LampTimer.services.history_tracker import DailyHistoryTracker, DayRecord
from LampTimer.services.session_controller import SessionController, SessionSnapshot


class CountingTracker(DailyHistoryTracker):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.recorded = []

    def record_today(self, completed: bool):
        self.recorded.append((self.today(), completed))
        return super().record_today(completed)


@pytest.fixture
def tracker(clock) -> CountingTracker:
    return CountingTracker(today=clock)


@pytest.fixture
def controller(two_stage_catalog: StageCatalog, tracker: CountingTracker) -> SessionController:
    return SessionController(two_stage_catalog, tracker)


def tick(controller: SessionController, times: int) -> None:
    for _ in range(times):
        controller.countdown.tick()


def test_two_stage_walkthrough(controller: SessionController, tracker: CountingTracker, clock) -> None:
    assert controller.active_stage.id == "L"
    assert controller.time_remaining == 3

    controller.start()
    tick(controller, 3)
    assert controller.time_remaining == 0
    assert controller.is_running is False

    controller.complete_and_advance()
    assert controller.active_stage.id == "A"
    assert controller.time_remaining == 2
    assert controller.completed_stage_ids == frozenset({"L"})

    controller.start()
    tick(controller, 2)
    assert controller.time_remaining == 0
    assert "A" not in controller.completed_stage_ids

    controller.complete_and_advance()
    assert controller.completed_stage_ids == frozenset({"L", "A"})
    assert controller.sequencer.is_fully_complete() is True
    assert controller.history == [DayRecord(clock(), True)]
    assert controller.active_stage.id == "A"
    assert tracker.recorded == [(clock(), True)]


def test_complete_on_expiry_marks_stage(two_stage_catalog: StageCatalog, tracker: CountingTracker) -> None:
    controller = SessionController(two_stage_catalog, tracker, complete_on_expiry=True)

    controller.start()
    tick(controller, 3)

    assert controller.completed_stage_ids == frozenset({"L"})
    assert controller.active_stage.id == "L"
    assert controller.is_running is False

    controller.complete_and_advance()
    controller.start()
    tick(controller, 2)

    assert controller.completed_stage_ids == frozenset({"L", "A"})
    assert len(tracker.recorded) == 1

    controller.complete_and_advance()
    assert len(tracker.recorded) == 1


def test_full_day_records_exactly_once(tracker: CountingTracker) -> None:
    controller = SessionController(default_catalog(), tracker)
    days = []
    controller.day_completed.connect(lambda iso: days.append(iso))

    for _ in range(len(controller.catalog) + 3):
        controller.complete_and_advance()

    assert controller.overall_progress == pytest.approx(100.0)
    assert tracker.recorded == [(tracker.today(), True)]
    assert days == [tracker.today().isoformat()]


def test_new_day_resets_session_but_keeps_history(controller: SessionController, clock) -> None:
    controller.complete_and_advance()
    controller.complete_and_advance()
    history_before = controller.history

    clock.advance()
    controller.new_day()

    assert controller.completed_stage_ids == frozenset()
    assert controller.active_stage.id == "L"
    assert controller.time_remaining == 3
    assert controller.history == history_before

    controller.complete_and_advance()
    controller.complete_and_advance()
    assert [record.date for record in controller.history] == [history_before[0].date, clock()]


def test_select_unknown_stage_propagates(controller: SessionController) -> None:
    controller.start()
    tick(controller, 1)
    before = controller.snapshot()

    with pytest.raises(UnknownStage):
        controller.select_stage("X")

    assert controller.snapshot() == before


def test_select_stage_stops_and_reloads(controller: SessionController) -> None:
    controller.start()
    tick(controller, 1)

    controller.select_stage("A")
    tick(controller, 1)

    assert controller.time_remaining == 2
    assert controller.is_running is False


def test_reset_current_stage(controller: SessionController) -> None:
    controller.complete_and_advance()
    controller.start()
    tick(controller, 1)

    controller.reset_current_stage()

    assert controller.active_stage.id == "A"
    assert controller.time_remaining == 2
    assert controller.is_running is False
    assert controller.completed_stage_ids == frozenset({"L"})


def test_toggle_switches_between_running_and_paused(controller: SessionController) -> None:
    controller.toggle()
    assert controller.is_running is True
    tick(controller, 1)
    controller.toggle()
    assert controller.is_running is False
    assert controller.time_remaining == 2


def test_projections(controller: SessionController) -> None:
    controller.start()
    tick(controller, 1)

    assert controller.time_remaining_text == "00:02"
    assert controller.stage_progress == pytest.approx(1 / 3)
    assert controller.overall_progress == 0

    controller.complete_and_advance()
    assert controller.overall_progress == pytest.approx(50.0)


def test_default_catalog_time_text() -> None:
    controller = SessionController()
    assert controller.time_remaining_text == "40:00"


def test_changed_fires_on_operations(controller: SessionController) -> None:
    changes = []
    controller.changed.connect(lambda: changes.append(1))

    controller.start()
    controller.pause()
    controller.select_stage("A")
    controller.complete_and_advance()
    controller.new_day()

    assert len(changes) == 5


def test_stage_expired_is_relayed(controller: SessionController) -> None:
    expired = []
    controller.stage_expired.connect(lambda stage_id: expired.append(stage_id))

    controller.start()
    tick(controller, 5)

    assert expired == ["L"]


def test_snapshot_restore(controller: SessionController, two_stage_catalog: StageCatalog, clock) -> None:
    controller.complete_and_advance()
    controller.start()
    tick(controller, 1)
    snapshot = controller.snapshot()

    assert snapshot == SessionSnapshot(clock().isoformat(), "A", 1, True, ("L",))
    assert SessionSnapshot.from_dict(snapshot.to_dict()) == snapshot

    fresh = SessionController(two_stage_catalog, DailyHistoryTracker(today=clock))
    fresh.restore(snapshot)

    assert fresh.active_stage.id == "A"
    assert fresh.time_remaining == 1
    assert fresh.is_running is False
    assert fresh.completed_stage_ids == frozenset({"L"})


def test_restore_rejects_unknown_stage(controller: SessionController, clock) -> None:
    with pytest.raises(UnknownStage):
        controller.restore(SessionSnapshot(clock().isoformat(), "X", 1, False, ()))
    assert controller.active_stage.id == "L"


def test_sessions_are_independent(two_stage_catalog: StageCatalog, clock) -> None:
    first = SessionController(two_stage_catalog, DailyHistoryTracker(today=clock))
    second = SessionController(two_stage_catalog, DailyHistoryTracker(today=clock))

    first.start()
    tick(first, 2)
    first.complete_and_advance()

    assert second.time_remaining == 3
    assert second.completed_stage_ids == frozenset()


def test_restore_fully_completed_snapshot_closes_the_day(
    controller: SessionController, tracker: CountingTracker, clock
) -> None:
    days = []
    controller.day_completed.connect(lambda iso: days.append(iso))

    controller.restore(SessionSnapshot(clock().isoformat(), "A", 0, False, ("L", "A")))
    controller.complete_and_advance()

    assert tracker.today_record() == DayRecord(clock(), True)
    assert tracker.recorded == [(clock(), True)]
    assert days == [clock().isoformat()]


def test_restore_does_not_rerecord_a_closed_day(
    two_stage_catalog: StageCatalog, clock
) -> None:
    tracker = CountingTracker([DayRecord(clock(), True)], today=clock)
    controller = SessionController(two_stage_catalog, tracker)

    controller.restore(SessionSnapshot(clock().isoformat(), "A", 0, False, ("L", "A")))

    assert tracker.recorded == []
    assert controller.sequencer.is_fully_complete() is True


def test_restore_skips_malformed_completed_ids(controller: SessionController, clock) -> None:
    snapshot = SessionSnapshot.from_dict(
        {"date": clock().isoformat(), "active_stage_id": "A", "remaining_seconds": 1, "completed_stage_ids": [["L"], "A"]}
    )

    controller.restore(snapshot)

    assert controller.completed_stage_ids == frozenset({"A"})
    assert controller.active_stage.id == "A"
