import json

from django.apps import apps
from django.core.management.base import BaseCommand
from inventory.notifications import NotificationAggregator


class Command(BaseCommand):
    help = "Print the current low/out-of-stock snapshot, optionally pushing it to subscribers."

    def add_arguments(self, parser):
        parser.add_argument(
            "--publish",
            action="store_true",
            help="Also publish the snapshot on the bound notification channel.",
        )

    def handle(self, *args, **options):
        if options["publish"]:
            channel = getattr(apps.get_app_config("inventory"), "channel", None)
            snapshot = NotificationAggregator(channel=channel).publish()
        else:
            snapshot = NotificationAggregator().recompute()
        self.stdout.write(json.dumps(snapshot.as_dict(), ensure_ascii=False, indent=2))
        self.stdout.write(self.style.SUCCESS(f"Flagged balances: {snapshot.length}"))


# EOF
