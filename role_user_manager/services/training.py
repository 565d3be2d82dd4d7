import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests
from django.utils.module_loading import import_string

from role_user_manager import settings as app_settings
from role_user_manager.models.user import User
from role_user_manager.typing import TrainingStats

logger = logging.getLogger(__name__)


class TrainingProvider(ABC):
    """
    The external training system (LearnDash or similar) that owns courses and certificates.
    """

    @abstractmethod
    def get_enrolled_courses(self, user: User) -> list[Any]:
        ...

    @abstractmethod
    def is_course_completed(self, user: User, course_id: Any) -> bool:
        ...

    def get_certificates(self, user: User) -> list[Any]:
        return []

    def remove_course_access(self, user: User, course_id: Any) -> bool:
        raise NotImplementedError


class LearnDashRestProvider(TrainingProvider):
    """
    Talks to a LearnDash REST bridge that exposes, per user:

        GET    {TRAINING_API_URL}/users/<id>/courses/            -> [{"id": 12, "completed": true}, ...]
        GET    {TRAINING_API_URL}/users/<id>/certificates/       -> [{"course": 12, "url": "..."}, ...]
        DELETE {TRAINING_API_URL}/users/<id>/courses/<course>/   -> 204
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None, timeout=None):
        self.base_url = (base_url or app_settings.TRAINING_API_URL or "").rstrip("/")
        self.token = token or app_settings.TRAINING_API_TOKEN
        self.timeout = timeout or app_settings.TRAINING_API_TIMEOUT
        self._courses_cache: dict[int, list[dict]] = {}

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _get(self, path: str) -> list[dict]:
        response = requests.get(
            f"{self.base_url}{path}", headers=self._headers(), timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    def _courses(self, user: User) -> list[dict]:
        if user.pk not in self._courses_cache:
            self._courses_cache[user.pk] = self._get(f"/users/{user.pk}/courses/")
        return self._courses_cache[user.pk]

    def get_enrolled_courses(self, user: User) -> list[Any]:
        return [course["id"] for course in self._courses(user)]

    def is_course_completed(self, user: User, course_id: Any) -> bool:
        return any(
            course["id"] == course_id and course.get("completed") for course in self._courses(user)
        )

    def get_certificates(self, user: User) -> list[Any]:
        return self._get(f"/users/{user.pk}/certificates/")

    def remove_course_access(self, user: User, course_id: Any) -> bool:
        response = requests.delete(
            f"{self.base_url}/users/{user.pk}/courses/{course_id}/",
            headers=self._headers(),
            timeout=self.timeout,
        )
        self._courses_cache.pop(user.pk, None)
        return response.ok


class TrainingService:
    @staticmethod
    def get_provider() -> Optional[TrainingProvider]:
        if not app_settings.TRAINING_PROVIDER:
            return None
        return import_string(app_settings.TRAINING_PROVIDER)()

    @staticmethod
    def empty_stats() -> TrainingStats:
        return {
            "courses_enrolled": 0,
            "courses_completed": 0,
            "certificates_earned": 0,
            "completion_rate": 0,
        }

    @staticmethod
    def get_stats(user: User, provider: Optional[TrainingProvider] = None) -> TrainingStats:
        """
        Training counters of a user. Zeroed when no training provider is configured or it cannot be reached.
        """
        if provider is None:
            return TrainingService.empty_stats()

        try:
            enrolled = provider.get_enrolled_courses(user)
            completed = [course_id for course_id in enrolled if provider.is_course_completed(user, course_id)]
            certificates = provider.get_certificates(user)
        except requests.RequestException as e:
            logger.exception(f"Training stats of user {user.username} unavailable: {str(e)}")
            return TrainingService.empty_stats()

        return {
            "courses_enrolled": len(enrolled),
            "courses_completed": len(completed),
            "certificates_earned": len(certificates),
            "completion_rate": round(len(completed) / len(enrolled) * 100, 1) if enrolled else 0,
        }

    @staticmethod
    def remove_course_access(user: User, course_id: Any, provider: TrainingProvider) -> bool:
        try:
            removed = provider.remove_course_access(user, course_id)
        except NotImplementedError:
            return False
        except requests.RequestException as e:
            logger.exception(f"Removing user {user.username} from course {course_id} failed: {str(e)}")
            return False
        if removed:
            logger.info(f"User {user.username} removed from course {course_id}")
        return removed
