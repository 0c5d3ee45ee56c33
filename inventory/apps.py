"""Django app configuration for the inventory ledger."""

import atexit

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    """Binds the stock notification channel for the lifetime of the process."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    channel = None

    def ready(self):
        from .notifications import SignalChannel

        self.channel = SignalChannel()
        atexit.register(self.release_channel)

    def release_channel(self):
        if self.channel is not None:
            self.channel.close()
        self.channel = None


# EOF
