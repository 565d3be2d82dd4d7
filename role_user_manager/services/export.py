import csv
import io
import logging
from datetime import datetime
from typing import Any, Iterable, Optional, Union

from django.utils import timezone
from django.utils.text import get_valid_filename

from role_user_manager.models.user import User
from role_user_manager.services.hierarchy import HierarchyService
from role_user_manager.services.training import TrainingProvider
from role_user_manager.services.user import UserService
from role_user_manager.typing import DescendantNode, TeamExportOptions
from role_user_manager.utils.choices import MetaKeys
from role_user_manager.utils.functions import format_short_date

logger = logging.getLogger(__name__)

USERS_EXPORT_HEADERS = [
    "User ID",
    "Username",
    "Email",
    "Display Name",
    "Roles",
    "Program",
    "Sites",
    "Parent User ID",
    "Parent User Name",
    "Registration Date",
    "Last Login",
]

DASHBOARD_EXPORT_HEADERS = ["Name", "Email", "Role", "Program", "Site", "Registration Date"]

TEAM_BASIC_HEADERS = ["Name", "Email", "Username", "Role", "Registration Date"]
TEAM_ASSIGNMENT_HEADERS = ["Program", "Site"]
TEAM_TRAINING_HEADERS = [
    "Courses Enrolled",
    "Courses Completed",
    "Certificates Earned",
    "Completion Rate %",
]

EMPTY_DASHBOARD_VALUE = "—"
NOT_ASSIGNED = "Not assigned"


def _write_csv(rows: Iterable[list[Any]]) -> str:
    """
    Every field is double-quoted and embedded quotes are doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def _format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime("%Y-%m-%d %H:%M:%S")


def format_rate(rate: Union[int, float]) -> str:
    return f"{rate:g}"


def _timestamp() -> str:
    return timezone.localtime().strftime("%Y-%m-%d-%H-%M-%S")


class ExportService:
    @staticmethod
    def users_filename() -> str:
        return f"users-export-{_timestamp()}.csv"

    @staticmethod
    def dashboard_users_filename() -> str:
        return f"users_export_{timezone.localtime():%Y-%m-%d_%H-%M-%S}.csv"

    @staticmethod
    def team_filename(user: User) -> str:
        return get_valid_filename(
            f"team_export_{user.display_name}_{timezone.localtime():%Y-%m-%d_%H-%M-%S}.csv"
        )

    @staticmethod
    def users_csv(users: list[User]) -> str:
        """
        The management table export: one row per user with its "programme" and "sites" meta.
        """
        user_ids = [user.pk for user in users]
        programmes = UserService.get_meta_values(MetaKeys.PROGRAMME, user_ids)
        sites = UserService.get_meta_values(MetaKeys.SITES, user_ids)
        parent_ids = UserService.get_meta_values(MetaKeys.PARENT_USER_ID, user_ids)

        rows = [USERS_EXPORT_HEADERS]
        for user in users:
            parent_id = parent_ids.get(user.pk) or ""
            parent = UserService.get_user(parent_id) if parent_id else None
            user_sites = sites.get(user.pk)
            rows.append(
                [
                    user.pk,
                    user.username,
                    user.email,
                    user.display_name,
                    ", ".join(user.roles),
                    programmes.get(user.pk) or "",
                    ", ".join(user_sites) if isinstance(user_sites, list) else "",
                    parent_id,
                    parent.display_name if parent else "",
                    _format_datetime(user.date_joined),
                    _format_datetime(user.last_login),
                ]
            )

        logger.info(f"Exported {len(users)} users")
        return _write_csv(rows)

    @staticmethod
    def dashboard_users_csv(users: list[User]) -> str:
        """
        The dashboard export: one row per user with its "program" and "site" meta.
        A header-only file is produced when no user matches.
        """
        user_ids = [user.pk for user in users]
        programs = UserService.get_meta_values(MetaKeys.PROGRAM, user_ids)
        sites = UserService.get_meta_values(MetaKeys.SITE, user_ids)

        rows = [DASHBOARD_EXPORT_HEADERS]
        for user in users:
            rows.append(
                [
                    user.display_name,
                    user.email,
                    ", ".join(user.roles),
                    programs.get(user.pk) or EMPTY_DASHBOARD_VALUE,
                    sites.get(user.pk) or EMPTY_DASHBOARD_VALUE,
                    _format_datetime(user.date_joined),
                ]
            )
        return _write_csv(rows)

    @staticmethod
    def team_headers(options: TeamExportOptions) -> list[str]:
        headers = ["Hierarchy Level"]
        if options.get("include_basic", True):
            headers.extend(TEAM_BASIC_HEADERS)
        if options.get("include_assignment", True):
            headers.extend(TEAM_ASSIGNMENT_HEADERS)
        if options.get("include_training", True):
            headers.extend(TEAM_TRAINING_HEADERS)
        return headers

    @staticmethod
    def team_row(node: DescendantNode, options: TeamExportOptions) -> list[Any]:
        depth = node["depth"]
        indent = "  " * depth + ("└─ " if depth > 0 else "")
        row = [indent + ("Team Leader" if depth == 0 else "Team Member")]

        if options.get("include_basic", True):
            row.extend(
                [
                    node["display_name"],
                    node["email"],
                    node["username"],
                    node["role_display"],
                    format_short_date(node["registration_date"]),
                ]
            )
        if options.get("include_assignment", True):
            row.extend([node["program"] or NOT_ASSIGNED, node["site"] or NOT_ASSIGNED])
        if options.get("include_training", True):
            training = node["training"]
            row.extend(
                [
                    training["courses_enrolled"],
                    training["courses_completed"],
                    training["certificates_earned"],
                    format_rate(training["completion_rate"]),
                ]
            )
        return row

    @staticmethod
    def team_csv(
        user: User,
        options: TeamExportOptions,
        provider: Optional[TrainingProvider] = None,
    ) -> str:
        """
        The user as team leader, followed by the team flattened depth-first in pre-order.
        """
        nodes = [HierarchyService.build_root_node(user, provider=provider)]
        nodes.extend(
            HierarchyService.flatten(HierarchyService.get_descendants(user.pk, provider=provider))
        )

        rows = [ExportService.team_headers(options)]
        rows.extend(ExportService.team_row(node, options) for node in nodes)

        logger.info(f"Exported team of {user.username}: {len(nodes) - 1} members")
        return _write_csv(rows)
