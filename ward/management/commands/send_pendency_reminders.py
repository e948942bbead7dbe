from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from ward.services.notifications import send_pendency_reminder


class Command(BaseCommand):
    help = "Broadcast the open-pendencies reminder to connected clients; schedule every HOSPFLOW_REMINDER_INTERVAL_MINUTES."

    def handle(self, *args, **options):
        now = timezone.now()
        count = send_pendency_reminder()
        if count:
            self.stdout.write(self.style.SUCCESS(f"Reminder sent: {count} open pendencies at {now}"))
        else:
            self.stdout.write(f"No open pendencies at {now}; nothing sent")
        self.stdout.write(f"Next run expected in {settings.HOSPFLOW_REMINDER_INTERVAL_MINUTES} min")
