from django.core.management.base import BaseCommand, CommandError

from ticketing.domain.errors import DomainError
from ticketing.services import build_analytics_service


class Command(BaseCommand):
    help = "Compare analytics counters with the booking ledger and report drift"

    def add_arguments(self, parser):
        parser.add_argument("--event", help="Audit a single event by ID")
        parser.add_argument(
            "--fail-on-drift",
            action="store_true",
            help="Exit with an error status when any drift is found",
        )

    def handle(self, *args, **options):
        service = build_analytics_service()
        try:
            drift = service.audit(event_id=options["event"])
            uncounted = service.uncounted_bookings(event_id=options["event"])
        except DomainError as exc:
            raise CommandError(exc.message) from exc

        if not drift and not uncounted:
            self.stdout.write(self.style.SUCCESS("Analytics match the ledger"))
            return

        for item in drift:
            self.stdout.write(
                self.style.WARNING(
                    f"{item.scope} {item.key} {item.counter}: "
                    f"expected {item.expected}, found {item.actual}"
                )
            )
        for booking_id in uncounted:
            self.stdout.write(
                self.style.WARNING(f"booking {booking_id} is confirmed but not counted")
            )

        if options["fail_on_drift"]:
            raise CommandError(
                f"{len(drift)} analytics counter(s) drifted, "
                f"{len(uncounted)} confirmed booking(s) not counted"
            )
