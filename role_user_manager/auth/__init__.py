from .capabilities import (
    can_export_team,
    can_export_users,
    capability_required,
    has_any_role,
    roles_grant,
    user_can,
)
from .nonce import create_nonce, verify_nonce
from .session import NonceSessionAuthentication
