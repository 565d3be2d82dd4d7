from django.db import migrations

DEFAULT_ROLES = [
    {
        'name': 'administrator',
        'display_name': 'Administrator',
        'parent': None,
        'capabilities': {
            'read': True,
            'list_users': True,
            'edit_users': True,
            'delete_users': True,
            'promote_users': True,
            'manage_options': True,
        },
    },
    {
        'name': 'program-leader',
        'display_name': 'Program Leader',
        'parent': None,
        'capabilities': {'read': True, 'list_users': True, 'edit_users': True, 'promote_users': True},
    },
    {
        'name': 'site-supervisor',
        'display_name': 'Site Supervisor',
        'parent': 'program-leader',
        'capabilities': {'read': True, 'list_users': True},
    },
    {
        'name': 'frontline-staff',
        'display_name': 'Frontline Staff',
        'parent': 'site-supervisor',
        'capabilities': {'read': True},
    },
    {
        'name': 'data-viewer',
        'display_name': 'Data Viewer',
        'parent': None,
        'capabilities': {'read': True, 'list_users': True, 'data_viewer_export': True},
    },
]


def create_default_roles(apps, schema_editor):
    """
    Create the default roles if they don't exist.
    Idempotent, existing roles keep their capabilities.
    """
    Role = apps.get_model('role_user_manager', 'Role')

    for role_data in DEFAULT_ROLES:
        parent = Role.objects.filter(name=role_data['parent']).first() if role_data['parent'] else None
        Role.objects.get_or_create(
            name=role_data['name'],
            defaults={
                'display_name': role_data['display_name'],
                'capabilities': role_data['capabilities'],
                'parent': parent,
            },
        )


def delete_default_roles(apps, schema_editor):
    """
    Delete the default roles that no user is assigned to.
    """
    Role = apps.get_model('role_user_manager', 'Role')
    UserRole = apps.get_model('role_user_manager', 'UserRole')

    for role_data in reversed(DEFAULT_ROLES):
        if not UserRole.objects.filter(role=role_data['name']).exists():
            Role.objects.filter(name=role_data['name']).delete()


class Migration(migrations.Migration):
    dependencies = [
        ('role_user_manager', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_default_roles, delete_default_roles),
    ]
