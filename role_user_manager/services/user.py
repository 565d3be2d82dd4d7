import logging
from typing import Any, Iterable, Optional

from django.db import transaction

from role_user_manager.models import UserMeta
from role_user_manager.models.user import User
from role_user_manager.services.role import RoleService
from role_user_manager.services.training import TrainingProvider, TrainingService
from role_user_manager.settings import EXPORT_ROLES, TEAM_ROLES
from role_user_manager.signals import user_parent_changed
from role_user_manager.typing import UserDetails, UserFilters
from role_user_manager.utils.choices import MetaKeys
from role_user_manager.utils.functions import get_or_none, to_int

logger = logging.getLogger(__name__)


class UserService:
    # User meta
    @staticmethod
    def get_meta(user: User, key: str, default: Any = None) -> Any:
        meta = get_or_none(UserMeta.objects, user=user, meta_key=key)
        if meta is None or meta.meta_value in (None, ""):
            return default
        return meta.meta_value

    @staticmethod
    def get_meta_values(key: str, user_ids: Optional[Iterable[int]] = None) -> dict[int, Any]:
        """
        Values of one meta key for many users in a single query, keyed by user id.
        """
        queryset = UserMeta.objects.filter(meta_key=key)
        if user_ids is not None:
            queryset = queryset.filter(user_id__in=list(user_ids))
        return dict(queryset.values_list("user_id", "meta_value"))

    @staticmethod
    def update_meta(user: User, key: str, value: Any) -> UserMeta:
        meta, _ = UserMeta.objects.update_or_create(
            user=user, meta_key=key, defaults={"meta_value": value}
        )
        return meta

    @staticmethod
    def get_parent_id(user: User) -> Optional[int]:
        return to_int(UserService.get_meta(user, MetaKeys.PARENT_USER_ID)) or None

    @staticmethod
    def get_parent(user: User) -> Optional[User]:
        parent_id = UserService.get_parent_id(user)
        return UserService.get_user(parent_id) if parent_id else None

    @staticmethod
    def get_sites(user: User) -> list[str]:
        sites = UserService.get_meta(user, MetaKeys.SITES, [])
        return sites if isinstance(sites, list) else []

    # Users
    @staticmethod
    def get_user(user_id: Any) -> Optional[User]:
        user_id = to_int(user_id)
        if user_id <= 0:
            return None
        return get_or_none(User.objects, pk=user_id)

    @staticmethod
    def get_filtered_users(filters: UserFilters) -> list[User]:
        """
        Users of the management table, ordered by display name.
        The program filter matches the "programme" meta, the site filter looks into the "sites" list.
        """
        users = list(User.objects.prefetch_related("user_roles").order_by("display_name", "pk"))

        role = filters.get("role")
        program = filters.get("program")
        site = filters.get("site")

        if role:
            users = [user for user in users if role in user.roles]
        if program:
            programmes = UserService.get_meta_values(MetaKeys.PROGRAMME)
            users = [user for user in users if programmes.get(user.pk) == program]
        if site:
            user_sites = UserService.get_meta_values(MetaKeys.SITES)
            users = [
                user for user in users
                if isinstance(user_sites.get(user.pk), list) and site in user_sites[user.pk]
            ]
        return users

    @staticmethod
    def get_dashboard_filtered_users(program: str = "", site: str = "") -> list[User]:
        """
        Users of the dashboard export, matched on the "program" and "site" meta.
        """
        users = list(User.objects.prefetch_related("user_roles").order_by("display_name", "pk"))
        if program:
            programs = UserService.get_meta_values(MetaKeys.PROGRAM)
            users = [user for user in users if programs.get(user.pk) == program]
        if site:
            sites = UserService.get_meta_values(MetaKeys.SITE)
            users = [user for user in users if sites.get(user.pk) == site]
        return users

    @staticmethod
    def get_users_for_parent(exclude: Optional[User] = None) -> list[dict]:
        users = User.objects.order_by("display_name", "pk")
        if exclude is not None:
            users = users.exclude(pk=exclude.pk)
        return [
            {"ID": user.pk, "display_name": user.display_name, "user_email": user.email}
            for user in users
        ]

    @staticmethod
    def delete_user(user: User, actor: Optional[User] = None) -> bool:
        if actor is not None and actor.pk == user.pk:
            logger.info(f"User {actor.username} tried to delete themselves, skipping.")
            return False

        username, user_id = user.username, user.pk
        user.delete()
        logger.info(f"User deleted: {username} (ID: {user_id})")
        return True

    @staticmethod
    def bulk_action(
        user_ids: Iterable[Any], action: str, role: str = "", actor: Optional[User] = None
    ) -> tuple[int, int]:
        """
        Apply "remove" or "assign_role" to every user id.

        Returns:
            The number of users processed successfully and the number of failures
        """
        success = fail = 0
        for user_id in user_ids:
            user = UserService.get_user(user_id)
            if user is None:
                fail += 1
                continue

            if action == "remove":
                if UserService.delete_user(user, actor=actor):
                    success += 1
                else:
                    fail += 1
            elif action == "assign_role" and role:
                RoleService.set_role(user, role, actor=actor)
                success += 1
            else:
                fail += 1

        logger.info(f"Bulk action {action}: {success} success, {fail} failed")
        return success, fail

    @staticmethod
    @transaction.atomic
    def set_parent(user: User, parent_id: Optional[int], actor: Optional[User] = None):
        old_parent_id = UserService.get_parent_id(user)
        if parent_id and parent_id == user.pk:
            logger.warning(f"User {user.username} is being set as their own parent")

        UserService.update_meta(user, MetaKeys.PARENT_USER_ID, parent_id or "")
        user_parent_changed.send(
            sender=UserService,
            user=user,
            actor=actor,
            old_parent_id=old_parent_id,
            new_parent_id=parent_id or None,
        )

    @staticmethod
    def get_user_details(
        user: User, actor: User, provider: Optional[TrainingProvider] = None
    ) -> UserDetails:
        from role_user_manager.services.hierarchy import HierarchyService

        role = user.primary_role
        user_data: UserDetails = {
            "id": user.pk,
            "username": user.username,
            "email": user.email,
            "display_name": user.display_name,
            "role": role,
            "role_display": RoleService.get_role_display_name(role),
            "program": UserService.get_meta(user, MetaKeys.PROGRAM, ""),
            "site": UserService.get_meta(user, MetaKeys.SITE, ""),
            "registration_date": user.date_joined.isoformat(),
            "parent_user_id": UserService.get_parent_id(user),
        }

        if user_data["parent_user_id"]:
            parent = UserService.get_user(user_data["parent_user_id"])
            user_data["parent_name"] = parent.display_name if parent else "Unknown"

        if provider is not None:
            user_data["training"] = TrainingService.get_stats(user, provider)

        user_data["descendants"] = (
            HierarchyService.get_descendants(user.pk, provider=provider) if role in TEAM_ROLES else []
        )
        user_data["can_export"] = bool(set(actor.roles) & set(EXPORT_ROLES))
        return user_data
