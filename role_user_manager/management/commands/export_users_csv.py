import logging

from django.core.management import BaseCommand

from role_user_manager.services.export import ExportService
from role_user_manager.services.user import UserService

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Export the users of the management table, optionally filtered by role, program and site, as CSV."

    def add_arguments(self, parser):
        parser.add_argument("--role", default="", help="Only users holding this role")
        parser.add_argument("--program", default="", help="Only users assigned to this program")
        parser.add_argument("--site", default="", help="Only users assigned to this site")
        parser.add_argument("--output", default="", help="File to write to, standard output by default")

    def handle(self, **options):
        users = UserService.get_filtered_users(
            {"role": options["role"], "program": options["program"], "site": options["site"]}
        )
        if not users:
            self.stderr.write("No users to export.")
            return

        content = ExportService.users_csv(users)
        if options["output"]:
            with open(options["output"], "w", encoding="utf-8", newline="") as output:
                output.write(content)
            logger.info(f"Exported {len(users)} users to {options['output']}")
        else:
            self.stdout.write(content, ending="")
