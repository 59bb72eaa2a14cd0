"""
Notification helper for showing reminders to the user.
Uses rumps (macOS) when it is installed; everywhere else delivery is a logged no-op.
"""

from datetime import datetime
from typing import List, Sequence

from syllabuscal.event_models import Event, Reminder
from syllabuscal.logging_helper import Log
from syllabuscal.reminders import reminders_for
from syllabuscal.settings_manager import notifications_enabled

try:
    import rumps  # type: ignore
    RUMPS_AVAILABLE = True
except ImportError:
    rumps = None  # type: ignore
    RUMPS_AVAILABLE = False

APP_NAME = "SyllabusCal"


def deliver(reminder: Reminder) -> bool:
    """
    Show one reminder as a desktop notification.

    Returns:
        True if the notification was handed to the system, False otherwise
    """
    if not RUMPS_AVAILABLE:
        Log.info(f"Notifications unavailable - skipping: {reminder.title}")
        return False

    if not notifications_enabled():
        Log.info(f"Notifications disabled in settings - skipping: {reminder.title}")
        return False

    try:
        rumps.notification(APP_NAME, reminder.title, reminder.body)
    except Exception as e:
        Log.warn(f"Failed to show notification '{reminder.title}': {e}")
        return False

    Log.kv({"stage": "notify", "result": "shown", "title": reminder.title})
    return True


def notify_upcoming(events: Sequence[Event], now: datetime) -> List[Reminder]:
    """
    Decide and deliver reminders for every event that has not started yet.

    Returns:
        The reminders that were decided, whether or not delivery succeeded
    """
    Log.section("Notifications")
    reminders = reminders_for(events, now)
    delivered = sum(1 for reminder in reminders if deliver(reminder))
    Log.kv({"stage": "notify", "decided": len(reminders), "delivered": delivered})
    return reminders
