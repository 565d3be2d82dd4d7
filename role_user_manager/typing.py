from typing import Any, Optional, TypedDict, Union

Role = str
ProgramSiteMap = dict[str, list[str]]


class TrainingStats(TypedDict):
    courses_enrolled: int
    courses_completed: int
    certificates_earned: int
    completion_rate: Union[int, float]


class DescendantNode(TypedDict):
    id: int
    display_name: str
    email: str
    username: str
    role: Role
    role_display: str
    program: str
    site: str
    registration_date: str
    depth: int
    training: TrainingStats
    children: list["DescendantNode"]


"""
Example of a descendant node, as returned by HierarchyService.get_descendants:
{
    "id": 7,
    "display_name": "Jane Doe",
    "email": "jane@example.com",
    "username": "jane",
    "role": "site-supervisor",
    "role_display": "Site Supervisor",
    "program": "North",
    "site": "Harbour",
    "registration_date": "2024-03-01T09:30:00+00:00",
    "depth": 1,
    "training": {
        "courses_enrolled": 4,
        "courses_completed": 3,
        "certificates_earned": 2,
        "completion_rate": 75.0
    },
    "children": []
}
"""


class UserDetails(TypedDict, total=False):
    id: int
    username: str
    email: str
    display_name: str
    role: Role
    role_display: str
    program: str
    site: str
    registration_date: str
    parent_user_id: Optional[int]
    parent_name: str
    training: TrainingStats
    descendants: list[DescendantNode]
    can_export: bool


class TeamExportOptions(TypedDict, total=False):
    include_basic: bool
    include_assignment: bool
    include_training: bool


class UserFilters(TypedDict, total=False):
    role: str
    program: str
    site: str


class UserEventDict(TypedDict):
    event_type: str
    user_id: int
    actor_id: Optional[int]
    payload: dict[str, Any]
