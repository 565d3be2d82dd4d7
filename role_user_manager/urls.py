from django.urls import path

from role_user_manager.views import (
    AjaxDispatchView,
    ExportTeamView,
    ExportUsersView,
    user_management_page,
)

app_name = "role_user_manager"

urlpatterns = [
    path("ajax/", AjaxDispatchView.as_view(), name="ajax"),
    path("export/users/", ExportUsersView.as_view(), name="export-users"),
    path("export/team/", ExportTeamView.as_view(), name="export-team"),
    path("manage/", user_management_page, name="user-management"),
]
