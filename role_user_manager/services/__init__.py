from role_user_manager.services.export import ExportService
from role_user_manager.services.hierarchy import HierarchyService
from role_user_manager.services.program import ProgramSiteService
from role_user_manager.services.role import RoleService
from role_user_manager.services.training import TrainingService
from role_user_manager.services.user import UserService
from role_user_manager.services.workflow import PromotionWorkflowService
