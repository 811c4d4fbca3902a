from django.core.management.base import BaseCommand, CommandError

from attendance.domain import Identity
from attendance.domain.errors import AlreadyInitializedError
from attendance.services import AuthorityService
from attendance.stores.django_store import DjangoAttendanceStore


class Command(BaseCommand):
    help = "Create the event registry and mint the administrative authority."

    def add_arguments(self, parser):
        parser.add_argument("deployer", help="Identity that receives the authority.")

    def handle(self, *args, **options):
        try:
            authority = AuthorityService(DjangoAttendanceStore()).initialize(
                Identity(options["deployer"])
            )
        except (AlreadyInitializedError, ValueError) as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(f"authority_id={authority.id}")
        self.stdout.write(f"nonce={authority.nonce}")
