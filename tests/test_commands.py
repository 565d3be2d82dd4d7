from io import StringIO

from django.core.management import call_command

from role_user_manager.services.export import USERS_EXPORT_HEADERS
from role_user_manager.utils.choices import DefaultRoles


def test_export_to_stdout(make_user):
    make_user("staff", role=DefaultRoles.FRONTLINE_STAFF, sites=["Harbour"])
    make_user("leader", role=DefaultRoles.PROGRAM_LEADER)
    out = StringIO()

    call_command("export_users_csv", "--role", DefaultRoles.FRONTLINE_STAFF, stdout=out)

    lines = out.getvalue().splitlines()
    assert lines[0] == ",".join(f'"{header}"' for header in USERS_EXPORT_HEADERS)
    assert len(lines) == 2
    assert '"staff"' in lines[1]


def test_export_to_file(make_user, tmp_path):
    make_user("staff", sites=["Harbour"])
    output = tmp_path / "users.csv"

    call_command("export_users_csv", "--site", "Harbour", "--output", str(output))

    assert output.read_text(encoding="utf-8").count("\n") == 2


def test_nothing_to_export():
    err = StringIO()

    call_command("export_users_csv", "--program", "Nowhere", stderr=err)

    assert "No users to export." in err.getvalue()
