class ChoicesMixin:
    """
    A helper class, mostly useful to declare roles and other closed sets of names, in the form:

    class Roles(ChoicesMixin):
        RoleName = "role-database-name"
    """
    @classmethod
    def as_list(cls):
        return [(value, label) for (label, value) in cls.__dict__.items() if not label.startswith('_')]

    @classmethod
    def values(cls):
        return [value for (label, value) in cls.__dict__.items() if not label.startswith('_')]


class DefaultRoles(ChoicesMixin):
    ADMINISTRATOR = "administrator"
    DATA_VIEWER = "data-viewer"
    PROGRAM_LEADER = "program-leader"
    SITE_SUPERVISOR = "site-supervisor"
    FRONTLINE_STAFF = "frontline-staff"


class Capabilities(ChoicesMixin):
    READ = "read"
    LIST_USERS = "list_users"
    EDIT_USERS = "edit_users"
    DELETE_USERS = "delete_users"
    PROMOTE_USERS = "promote_users"
    MANAGE_OPTIONS = "manage_options"
    DATA_VIEWER_EXPORT = "data_viewer_export"


class NonceActions(ChoicesMixin):
    ROLE_MANAGER = "role_manager"
    DASHBOARD = "dashboard"
    PROMOTION = "promotion"
    WORKFLOW = "workflow"
    USER_MANAGEMENT = "user_management"
    EXPORT_USER_DESCENDANTS = "export_user_descendants"


class PromotionStatus(ChoicesMixin):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MetaKeys(ChoicesMixin):
    # The admin table and the inline editor use "programme"; the details modal and exports read "program".
    PROGRAMME = "programme"
    PROGRAM = "program"
    SITE = "site"
    SITES = "sites"
    PARENT_USER_ID = "parent_user_id"
