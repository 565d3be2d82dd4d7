from django.dispatch import Signal

# Sent with: user, actor, old_role, new_role
user_role_changed = Signal()

# Sent with: user, actor, old_parent_id, new_parent_id
user_parent_changed = Signal()

# Sent with: promotion_request, actor
promotion_request_submitted = Signal()
promotion_request_processed = Signal()
