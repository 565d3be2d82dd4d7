import logging
from collections import defaultdict
from typing import Any, Iterable, Optional

from role_user_manager.models.user import User
from role_user_manager.services.role import RoleService
from role_user_manager.services.training import TrainingProvider, TrainingService
from role_user_manager.services.user import UserService
from role_user_manager.typing import DescendantNode
from role_user_manager.utils.choices import MetaKeys
from role_user_manager.utils.functions import optional_str, to_int

logger = logging.getLogger(__name__)

# Hard ceiling on the walk. Parent links are not checked for cycles when written,
# so a cycle repeats until this depth instead of looping forever.
MAX_DEPTH = 10


class HierarchyService:
    @staticmethod
    def build_children_index(
        users: Iterable[User], parent_ids: dict[int, Any]
    ) -> dict[int, list[User]]:
        """
        Map each parent id to its direct children, keeping the order of `users`.
        """
        children_index = defaultdict(list)
        for user in users:
            parent_id = to_int(parent_ids.get(user.pk))
            if parent_id:
                children_index[parent_id].append(user)
        return children_index

    @staticmethod
    def get_descendants(
        root_id: int,
        provider: Optional[TrainingProvider] = None,
        users: Optional[list[User]] = None,
    ) -> list[DescendantNode]:
        """
        Direct and transitive children of `root_id`, as a forest of nested nodes.

        Args:
            root_id:    The id of the user whose team is requested
            provider:   Training provider used to decorate each node, counters are zeroed without it
            users:      The users to scan, all users in primary key order by default

        Returns:
            One node per direct child, each holding its own children up to MAX_DEPTH levels below the root
        """
        if users is None:
            users = list(User.objects.prefetch_related("user_roles").order_by("pk"))

        user_ids = [user.pk for user in users]
        children_index = HierarchyService.build_children_index(
            users, UserService.get_meta_values(MetaKeys.PARENT_USER_ID, user_ids)
        )
        context = {
            "provider": provider,
            "programs": UserService.get_meta_values(MetaKeys.PROGRAM, user_ids),
            "sites": UserService.get_meta_values(MetaKeys.SITE, user_ids),
        }
        return HierarchyService._walk(int(root_id), children_index, context, depth=0)

    @staticmethod
    def _walk(parent_id: int, children_index, context: dict, depth: int) -> list[DescendantNode]:
        if depth >= MAX_DEPTH:
            return []

        nodes = []
        for child in children_index.get(parent_id, []):
            node = HierarchyService._build_node(child, depth + 1, context)
            node["children"] = HierarchyService._walk(child.pk, children_index, context, depth + 1)
            nodes.append(node)
        return nodes

    @staticmethod
    def _build_node(user: User, depth: int, context: dict) -> DescendantNode:
        role = user.primary_role
        return {
            "id": user.pk,
            "display_name": user.display_name,
            "email": user.email,
            "username": user.username,
            "role": role,
            "role_display": RoleService.get_role_display_name(role),
            "program": optional_str(context["programs"].get(user.pk)),
            "site": optional_str(context["sites"].get(user.pk)),
            "registration_date": user.date_joined.isoformat(),
            "depth": depth,
            "training": TrainingService.get_stats(user, context["provider"]),
            "children": [],
        }

    @staticmethod
    def build_root_node(user: User, provider: Optional[TrainingProvider] = None) -> DescendantNode:
        context = {
            "provider": provider,
            "programs": UserService.get_meta_values(MetaKeys.PROGRAM, [user.pk]),
            "sites": UserService.get_meta_values(MetaKeys.SITE, [user.pk]),
        }
        return HierarchyService._build_node(user, 0, context)

    @staticmethod
    def flatten(nodes: list[DescendantNode]) -> list[DescendantNode]:
        """
        Depth-first, pre-order list of the nodes, without their children.
        """
        flattened = []
        for node in nodes:
            flattened.append({key: value for key, value in node.items() if key != "children"})
            flattened.extend(HierarchyService.flatten(node.get("children") or []))
        return flattened

    @staticmethod
    def count(nodes: list[DescendantNode]) -> int:
        return sum(1 + HierarchyService.count(node.get("children") or []) for node in nodes)
