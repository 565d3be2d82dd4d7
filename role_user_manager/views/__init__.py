from .ajax import AjaxDispatchView
from .export import ExportTeamView, ExportUsersView
from .management import user_management_page
