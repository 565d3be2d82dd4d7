from .user import User
from .user_role import UserRole
from .role import Role
from .user_meta import UserMeta
from .option import Option
from .promotion_request import PromotionRequest
