import logging

import pytest

from role_user_manager.presentation import field_display_value
from role_user_manager.services.fields import (
    ParentField,
    ProgramField,
    RoleField,
    SitesField,
    get_editable_field,
)
from role_user_manager.services.user import UserService
from role_user_manager.utils.choices import DefaultRoles, MetaKeys
from role_user_manager.utils.exceptions import ActionError, InvalidField


class TestEditableFields:
    def test_sites_round_trip(self, make_user):
        user = make_user("staff")

        SitesField.update(user, " Harbour, ,Airport ,Beach,")

        assert sorted(UserService.get_sites(user)) == ["Airport", "Beach", "Harbour"]

    def test_sites_from_list(self, make_user):
        user = make_user("staff")

        SitesField.update(user, ["Harbour", " ", "Airport"])

        assert UserService.get_sites(user) == ["Harbour", "Airport"]

    def test_unknown_role_is_rejected_without_mutation(self, make_user):
        user = make_user("staff", role=DefaultRoles.FRONTLINE_STAFF)

        with pytest.raises(ActionError) as e:
            RoleField.update(user, "emperor")

        assert e.value.message == "Invalid role specified"
        assert user.roles == [DefaultRoles.FRONTLINE_STAFF]

    def test_role_replaces_every_role(self, make_user):
        user = make_user("staff", role=DefaultRoles.FRONTLINE_STAFF)

        message = RoleField.update(user, DefaultRoles.SITE_SUPERVISOR)

        assert message == "User role updated successfully"
        assert user.roles == [DefaultRoles.SITE_SUPERVISOR]

    def test_program_writes_programme(self, make_user):
        user = make_user("staff")

        ProgramField.update(user, "<b>North</b>  East")

        assert UserService.get_meta(user, MetaKeys.PROGRAMME) == "North East"
        assert UserService.get_meta(user, MetaKeys.PROGRAM) is None

    @pytest.mark.parametrize("value", ["", "0", 0])
    def test_empty_parent_clears_it(self, make_user, value):
        leader = make_user("leader")
        user = make_user("staff", parent=leader)

        ParentField.update(user, value)

        assert UserService.get_parent_id(user) is None

    @pytest.mark.parametrize("value", ["-3", "abc"])
    def test_invalid_parent_is_rejected(self, make_user, value):
        user = make_user("staff")

        with pytest.raises(ActionError) as e:
            ParentField.update(user, value)

        assert e.value.message == "Invalid parent user"
        assert UserService.get_meta(user, MetaKeys.PARENT_USER_ID) is None

    def test_self_parent_is_accepted_and_logged(self, make_user, caplog):
        user = make_user("staff")

        with caplog.at_level(logging.WARNING):
            ParentField.update(user, str(user.pk))

        assert UserService.get_parent_id(user) == user.pk
        assert "own parent" in caplog.text

    def test_unknown_field_is_rejected(self):
        with pytest.raises(InvalidField):
            get_editable_field("email")

    @pytest.mark.parametrize("name", ["role", "program", "sites", "parent"])
    def test_known_fields(self, name):
        assert get_editable_field(name).name == name


class TestFieldDisplayValue:
    def test_unset_values(self, make_user):
        user = make_user("staff")

        assert field_display_value(user, "program") == "<em>Not set</em>"
        assert field_display_value(user, "sites") == "<em>Not set</em>"
        assert field_display_value(user, "parent") == "<em>No parent</em>"

    def test_set_values(self, make_user):
        leader = make_user("leader")
        user = make_user(
            "staff",
            role=DefaultRoles.FRONTLINE_STAFF,
            parent=leader,
            programme="North & South",
            sites=["Harbour", "Airport"],
        )

        assert field_display_value(user, "role") == "Frontline-staff"
        assert field_display_value(user, "program") == "North &amp; South"
        assert field_display_value(user, "sites") == "Harbour, Airport"
        assert field_display_value(user, "parent") == "leader"

    def test_missing_parent_is_unknown(self, make_user):
        user = make_user("staff", parent_user_id=9999)

        assert field_display_value(user, "parent") == "Unknown"
