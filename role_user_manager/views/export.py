import json
import logging

from django.http import HttpResponse
from rest_framework.permissions import AllowAny
from rest_framework.renderers import JSONRenderer
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from role_user_manager.ajax.registry import check_access, error_envelope
from role_user_manager.ajax.user_management import get_filters
from role_user_manager.auth import NonceSessionAuthentication, can_export_team
from role_user_manager.services.export import ExportService
from role_user_manager.services.training import TrainingService
from role_user_manager.services.user import UserService
from role_user_manager.typing import TeamExportOptions
from role_user_manager.utils.choices import Capabilities, NonceActions
from role_user_manager.utils.exceptions import ActionError
from role_user_manager.utils.functions import keep_keys, to_int

logger = logging.getLogger(__name__)


def csv_response(content: str, filename: str) -> HttpResponse:
    response = HttpResponse(content, content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    response["Pragma"] = "no-cache"
    response["Expires"] = "0"
    return response


def parse_team_export_options(data) -> TeamExportOptions:
    """
    Column groups come either as an "options" JSON object, or as checkboxes of the export form.
    Missing groups are included.
    """
    raw_options = data.get("options")
    if not raw_options and data.get("options_form"):
        return {key: key in data for key in TeamExportOptions.__annotations__}

    if isinstance(raw_options, dict):
        options = raw_options
    else:
        try:
            options = json.loads(raw_options or "{}")
        except (TypeError, ValueError):
            options = {}
    if not isinstance(options, dict):
        return {}
    return {
        key: bool(value)
        for key, value in keep_keys(options, TeamExportOptions.__annotations__).items()
    }


class ExportUsersView(APIView):
    """
    CSV of the users matching the management table filters.
    """

    authentication_classes = [NonceSessionAuthentication]
    permission_classes = [AllowAny]
    renderer_classes = [JSONRenderer]

    def get(self, request: Request):
        try:
            check_access(
                request.user,
                request.query_params,
                Capabilities.EDIT_USERS,
                nonce=NonceActions.USER_MANAGEMENT,
            )
        except ActionError as e:
            return Response(error_envelope(e.message))

        users = UserService.get_filtered_users(get_filters(request.query_params))
        if not users:
            return Response(error_envelope("No users to export."))

        return csv_response(ExportService.users_csv(users), ExportService.users_filename())


class ExportTeamView(APIView):
    """
    CSV of a user and the team below them, one row per member.
    """

    authentication_classes = [NonceSessionAuthentication]
    permission_classes = [AllowAny]
    renderer_classes = [JSONRenderer]

    def post(self, request: Request):
        try:
            check_access(
                request.user,
                request.data,
                can_export_team,
                nonce=NonceActions.EXPORT_USER_DESCENDANTS,
                permission_message="Insufficient permissions to export data",
            )

            user_id = to_int(request.data.get("user_id"))
            if user_id <= 0:
                raise ActionError("Invalid user ID")
            user = UserService.get_user(user_id)
            if user is None:
                raise ActionError("User not found")
        except ActionError as e:
            return Response(error_envelope(e.message))

        options = parse_team_export_options(request.data)
        logger.info(f"Team export of {user.username} requested by {request.user.username}")
        content = ExportService.team_csv(user, options, provider=TrainingService.get_provider())
        return csv_response(content, ExportService.team_filename(user))
