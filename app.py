import signal
import sys
import logging
from PySide6.QtCore import QCoreApplication, QTimer
from LampTimer.core.settings import load_settings, configure_logging
from LampTimer.core.stages import default_catalog, load_catalog
from LampTimer.core.paths import catalog_path
from LampTimer.core.errors import UnknownStage
from LampTimer.repos.history_repo import SqliteHistoryStore
from LampTimer.repos import state_repo
from LampTimer.services.history_tracker import DailyHistoryTracker
from LampTimer.services.session_controller import SessionController

logger = logging.getLogger("lamp")

def build_controller(settings):
    path = catalog_path()
    catalog = load_catalog(path) if path else default_catalog()
    tracker = DailyHistoryTracker(store=SqliteHistoryStore())
    tracker.ensure_today()
    return SessionController(catalog, tracker, complete_on_expiry=settings.complete_on_expiry)

def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    app = QCoreApplication(sys.argv)
    controller = build_controller(settings)

    snapshot = state_repo.load_snapshot(controller.history_tracker.today())
    if snapshot is not None:
        try:
            controller.restore(snapshot)
            logger.info("Restored paused session at stage %s", snapshot.active_stage_id)
        except UnknownStage:
            logger.warning("Saved stage %s no longer exists; starting fresh", snapshot.active_stage_id)
    if len(sys.argv) > 1:
        try:
            controller.select_stage(sys.argv[1])
        except UnknownStage as exc:
            print(exc)
            return 2

    def on_remaining(seconds):
        stage = controller.active_stage
        print(f"\r[{stage.label}] {stage.full_name:<12} {controller.time_remaining_text}  "
            f"{controller.overall_progress:3.0f}% done", end="", flush=True)

    def on_expired(stage_id):
        print()
        was_last = controller.catalog.is_last(stage_id)
        controller.complete_and_advance()
        if was_last:
            app.quit()
            return
        stage = controller.active_stage
        print(f"Next: {stage.full_name} - {stage.description}")
        controller.start()

    def on_day_completed(iso_date):
        logger.info("All stages complete for %s (streak: %d days)", iso_date, controller.history_tracker.current_streak())

    def on_quit():
        print()
        controller.pause()
        state_repo.save_snapshot(controller.snapshot())

    controller.remaining_changed.connect(on_remaining)
    controller.stage_expired.connect(on_expired)
    controller.day_completed.connect(on_day_completed)
    app.aboutToQuit.connect(on_quit)

    # let Python see Ctrl+C while the Qt loop is running
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    wakeup = QTimer()
    wakeup.start(200)
    wakeup.timeout.connect(lambda: None)

    stage = controller.active_stage
    print(f"{stage.full_name}: {stage.description}")
    controller.start()
    return app.exec()

if __name__ == "__main__":
    sys.exit(main())
