from django.core.management.base import BaseCommand, CommandError

from countries.exceptions import RenderError
from countries.services import CountryRefreshService


class Command(BaseCommand):
    help = "Re-render the summary image from the stored countries without refreshing them."

    def handle(self, *args, **options):
        try:
            artifact = CountryRefreshService().render_summary()
        except RenderError as e:
            raise CommandError(f"Summary image generation failed: {e}") from e

        if artifact is None:
            raise CommandError("No refresh has been performed yet")
        self.stdout.write(self.style.SUCCESS(f"Summary image written to {artifact.path}"))
