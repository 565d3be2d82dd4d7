from django.contrib.auth.models import AnonymousUser

from role_user_manager.auth import can_export_team, roles_grant, user_can
from role_user_manager.models import Role
from role_user_manager.services.role import RoleService
from role_user_manager.utils.choices import Capabilities, DefaultRoles, NonceActions


class TestRoleService:
    def test_default_roles_are_seeded(self):
        assert set(DefaultRoles.values()) <= set(RoleService.get_available_roles())

    def test_create_role_copies_parent_capabilities(self):
        assert RoleService.create_role("team-lead", "Team Lead", DefaultRoles.SITE_SUPERVISOR)

        role = Role.objects.get(name="team-lead")
        assert role.parent.name == DefaultRoles.SITE_SUPERVISOR
        assert role.capabilities == RoleService.get_role_capabilities(DefaultRoles.SITE_SUPERVISOR)

    def test_create_role_without_parent_can_read(self):
        assert RoleService.create_role("guest")

        role = Role.objects.get(name="guest")
        assert role.display_name == "guest"
        assert role.capabilities == {"read": True}

    def test_create_role_refuses_invalid_or_taken_names(self):
        assert not RoleService.create_role("Bad Name")
        assert not RoleService.create_role(DefaultRoles.DATA_VIEWER)
        assert not RoleService.create_role("orphan", parent_name="missing")

    def test_delete_role(self):
        RoleService.create_role("temporary")

        assert RoleService.delete_role("temporary")
        assert not RoleService.role_exists("temporary")

    def test_delete_refuses_administrator(self):
        assert not RoleService.delete_role(DefaultRoles.ADMINISTRATOR)
        assert RoleService.role_exists(DefaultRoles.ADMINISTRATOR)

    def test_delete_refuses_assigned_role(self, frontline_staff):
        assert not RoleService.delete_role(DefaultRoles.FRONTLINE_STAFF)

    def test_update_capabilities_from_names(self):
        assert RoleService.update_role_capabilities(DefaultRoles.DATA_VIEWER, ["read", "list_users", ""])

        assert RoleService.get_role_capabilities(DefaultRoles.DATA_VIEWER) == {
            "read": True,
            "list_users": True,
        }

    def test_update_capabilities_of_missing_role(self):
        assert not RoleService.update_role_capabilities("missing", ["read"])

    def test_inherit_parent_capabilities(self):
        RoleService.create_role("junior", parent_name=DefaultRoles.PROGRAM_LEADER)
        RoleService.update_role_capabilities("junior", {"read": True, "custom": True})

        assert RoleService.inherit_parent_capabilities("junior")

        capabilities = RoleService.get_role_capabilities("junior")
        assert capabilities["edit_users"] is True
        assert capabilities["custom"] is True

    def test_inherit_without_parent(self):
        assert not RoleService.inherit_parent_capabilities(DefaultRoles.ADMINISTRATOR)

    def test_display_name(self):
        Role.objects.create(name="custom_role")

        assert RoleService.get_role_display_name(DefaultRoles.SITE_SUPERVISOR) == "Site Supervisor"
        assert RoleService.get_role_display_name("custom_role") == "Custom role"
        assert RoleService.get_role_display_name("") == ""

    def test_set_role_replaces_all_roles(self, make_user):
        user = make_user("staff", role=DefaultRoles.FRONTLINE_STAFF)
        RoleService.set_role(user, DefaultRoles.DATA_VIEWER)

        assert user.roles == [DefaultRoles.DATA_VIEWER]
        assert user.primary_role == DefaultRoles.DATA_VIEWER


class TestCapabilities:
    def test_roles_grant_capabilities(self, administrator, frontline_staff, data_viewer):
        assert user_can(administrator, Capabilities.DELETE_USERS)
        assert not user_can(frontline_staff, Capabilities.EDIT_USERS)
        assert roles_grant(data_viewer, Capabilities.DATA_VIEWER_EXPORT)

    def test_anonymous_user_has_no_capabilities(self):
        assert not user_can(AnonymousUser(), Capabilities.READ)
        assert not user_can(None, Capabilities.READ)

    def test_superuser_without_role(self, make_user):
        superuser = make_user("root")
        superuser.is_superuser = True

        assert user_can(superuser, Capabilities.MANAGE_OPTIONS)
        assert not roles_grant(superuser, Capabilities.MANAGE_OPTIONS)

    def test_inactive_user(self, administrator):
        administrator.is_active = False

        assert not user_can(administrator, Capabilities.READ)

    def test_team_export_roles(self, program_leader, data_viewer, frontline_staff):
        assert can_export_team(program_leader)
        assert can_export_team(data_viewer)
        assert not can_export_team(frontline_staff)


class TestRoleActions:
    def test_create_role(self, post_action, administrator):
        result = post_action(
            administrator,
            "create_role",
            scope=NonceActions.ROLE_MANAGER,
            role_name="Coach",
            role_display_name="Coach",
            parent_role=DefaultRoles.FRONTLINE_STAFF,
        )

        assert result["message"] == "Role created successfully"
        assert RoleService.role_exists("coach")

    def test_create_role_with_empty_name(self, post_action, administrator):
        result = post_action(administrator, "create_role", scope=NonceActions.ROLE_MANAGER, role_name="!!")

        assert result["message"] == "Invalid role name"

    def test_create_existing_role(self, post_action, administrator):
        result = post_action(
            administrator, "create_role", scope=NonceActions.ROLE_MANAGER, role_name=DefaultRoles.DATA_VIEWER
        )

        assert result["message"] == "Failed to create role"

    def test_update_role_capabilities(self, post_action, administrator):
        result = post_action(
            administrator,
            "update_role_capabilities",
            scope=NonceActions.ROLE_MANAGER,
            role=DefaultRoles.DATA_VIEWER,
            capabilities=["read", "list_users"],
        )

        assert result["message"] == "Role capabilities updated successfully"
        assert RoleService.get_role_capabilities(DefaultRoles.DATA_VIEWER) == {
            "read": True,
            "list_users": True,
        }

    def test_update_capabilities_of_unknown_role(self, post_action, administrator):
        result = post_action(
            administrator, "update_role_capabilities", scope=NonceActions.ROLE_MANAGER, role="missing"
        )

        assert result["message"] == "Invalid role"

    def test_delete_administrator_role(self, post_action, administrator):
        result = post_action(
            administrator, "delete_role", scope=NonceActions.ROLE_MANAGER, role=DefaultRoles.ADMINISTRATOR
        )

        assert result["message"] == "Failed to delete role"

    def test_get_role_capabilities(self, post_action, administrator):
        result = post_action(administrator, "get_role_capabilities", role=DefaultRoles.SITE_SUPERVISOR)

        assert result["data"] == {"read": True, "list_users": True}

    def test_get_parent_options(self, post_action, administrator):
        result = post_action(administrator, "get_parent_options")

        assert result["data"][DefaultRoles.PROGRAM_LEADER] == "Program Leader"

    def test_role_actions_require_manage_options(self, post_action, program_leader):
        result = post_action(
            program_leader, "create_role", scope=NonceActions.ROLE_MANAGER, role_name="coach"
        )

        assert result["message"] == "Insufficient permissions"
        assert not RoleService.role_exists("coach")
