import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="BookingMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("body", models.TextField(help_text="Message text")),
                ("sent_at", models.DateTimeField(default=django.utils.timezone.now, help_text="Time sent")),
                (
                    "booking",
                    models.ForeignKey(
                        help_text="Booking the thread belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="bookings.booking",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        help_text="Sender (the booking's customer or vendor)",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sent_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Message",
                "verbose_name_plural": "Messages",
                "db_table": "booking_messages",
                "ordering": ["sent_at", "id"],
                "indexes": [models.Index(fields=["booking", "sent_at"], name="booking_msg_booking_sent_idx")],
            },
        ),
    ]
