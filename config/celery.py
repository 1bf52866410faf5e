import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("vendorbook")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Close accepted bookings whose engagement is over - every hour
    "complete-finished-bookings": {
        "task": "bookings.complete_finished_bookings",
        "schedule": crontab(minute=15),
    },
    # Remind customers of tomorrow's bookings - once a day
    "send-upcoming-booking-reminders": {
        "task": "bookings.send_upcoming_booking_reminders",
        "schedule": crontab(minute=0, hour=9),
    },
}
