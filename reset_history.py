"""
Reset the LAMP completion history by clearing the database.
This will delete every day record and any saved paused session.
"""

from LampTimer.core.paths import db_path, state_path
from LampTimer.core.errors import HistoryStoreError
from LampTimer.repos.history_repo import SqliteHistoryStore
from LampTimer.repos.state_repo import clear_snapshot

def reset_history():
    """Delete all day records after confirmation."""
    db_file = db_path()

    if db_file.exists():
        print(f"Found database at: {db_file}")

        confirm = input("Are you sure you want to reset your LAMP history? This cannot be undone. (yes/no): ")

        if confirm.lower() in ['yes', 'y']:
            try:
                removed = SqliteHistoryStore(db_file).clear_days()
                print(f"✓ Removed {removed} day record(s)")
            except HistoryStoreError as e:
                print(f"✗ Error clearing history: {e}")
        else:
            print("Reset cancelled.")
    else:
        print("No database found. History is already empty.")

    if state_path().exists():
        confirm_state = input("\nAlso discard the saved paused session? (yes/no): ")
        if confirm_state.lower() in ['yes', 'y']:
            try:
                clear_snapshot()
                print("✓ Saved session discarded")
            except OSError as e:
                print(f"✗ Error deleting saved session: {e}")

if __name__ == "__main__":
    print("=" * 50)
    print("LAMP Timer - Reset History")
    print("=" * 50)
    reset_history()
