import typing as t

import structlog
from django.core.management.base import BaseCommand
from django.utils import timezone

from events.models import Event
from events.service.status import derive_status, refresh_event_status

logger = structlog.get_logger(__name__)


class Command(BaseCommand):
    """Recompute the cached status of every event that has both date bounds and no override.

    Statuses are always derived again at read time, so this only keeps the stored column
    (used for filtering) in line with the clock.
    """

    help = "Refresh the stored status of events from their date bounds."

    def add_arguments(self, parser: t.Any) -> None:
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report the changes without saving them.",
        )

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        """Execute the command."""
        now = timezone.now()
        dry_run = options["dry_run"]
        changed = 0
        for event in Event.objects.derivable().iterator():
            if dry_run:
                new_status = derive_status(event.status, event.date_start, event.date_end, now)
                if new_status != event.status:
                    changed += 1
                    self.stdout.write(f"{event.pk}: {event.status} -> {new_status}")
                continue
            if refresh_event_status(event, now=now, commit=True):
                changed += 1

        logger.info("event_statuses_refreshed", changed=changed, dry_run=dry_run)
        verb = "would change" if dry_run else "changed"
        self.stdout.write(self.style.SUCCESS(f"{changed} event status(es) {verb}."))
