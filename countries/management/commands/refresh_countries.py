from django.core.management.base import BaseCommand, CommandError

from countries.services import CountryRefreshService


class Command(BaseCommand):
    help = "Fetch countries and exchange rates and reconcile them into the database."

    def handle(self, *args, **options):
        result = CountryRefreshService().refresh()
        if result.error:
            message = f"{result.error}: {result.details}" if result.details else result.error
            if result.persisted:
                message += " (country data was saved; run render_summary to retry the image)"
            raise CommandError(message)

        self.stdout.write(self.style.SUCCESS(
            f"Refreshed {result.total} countries at {result.last_refreshed_at.isoformat()}"
        ))
        self.stdout.write(f"Summary image: {result.artifact}")
