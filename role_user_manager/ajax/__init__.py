from .registry import ACTIONS, ajax_action, dispatch, error_envelope, success_envelope

# Handlers register themselves on import
from . import dashboard, roles, user_management, workflow  # noqa: E402,F401
