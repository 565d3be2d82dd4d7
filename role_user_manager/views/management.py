from django.core.paginator import Paginator
from django.shortcuts import render

from role_user_manager.ajax.user_management import get_filters
from role_user_manager.auth import capability_required, create_nonce
from role_user_manager.presentation import parent_display, program_display, role_display, sites_display
from role_user_manager.services.program import ProgramSiteService
from role_user_manager.services.role import RoleService
from role_user_manager.services.user import UserService
from role_user_manager.settings import USERS_PER_PAGE
from role_user_manager.utils.choices import Capabilities, MetaKeys, NonceActions


def build_user_row(user, users_for_parent: list[dict]) -> dict:
    parent_id = UserService.get_parent_id(user)
    return {
        "user": user,
        "role": user.primary_role,
        "role_display": role_display(user),
        "program": UserService.get_meta(user, MetaKeys.PROGRAMME, ""),
        "program_display": program_display(user),
        "sites": UserService.get_sites(user),
        "sites_display": sites_display(user),
        "parent_id": parent_id,
        "parent_display": parent_display(user),
        # A user cannot be picked as their own parent
        "parent_options": [option for option in users_for_parent if option["ID"] != user.pk],
    }


@capability_required(Capabilities.EDIT_USERS)
def user_management_page(request):
    filters = get_filters(request.GET)
    users = UserService.get_filtered_users(filters)

    paginator = Paginator(users, USERS_PER_PAGE)
    page = paginator.get_page(request.GET.get("paged"))
    users_for_parent = UserService.get_users_for_parent()

    context = {
        "filters": filters,
        "roles": RoleService.get_available_roles(),
        "programs": ProgramSiteService.get_programs(),
        "sites": ProgramSiteService.get_all_sites(),
        "page": page,
        "rows": [build_user_row(user, users_for_parent) for user in page.object_list],
        "nonce": create_nonce(request.user, NonceActions.USER_MANAGEMENT),
    }
    return render(request, "role_user_manager/user_management.html", context)
