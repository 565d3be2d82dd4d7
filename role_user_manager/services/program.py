from typing import Any

from role_user_manager.models import Option
from role_user_manager.settings import PROGRAM_SITE_MAP_OPTION
from role_user_manager.typing import ProgramSiteMap
from role_user_manager.utils.functions import get_or_none


class ProgramSiteService:
    """
    Read access to the admin maintained program -> sites map.
    The map is stored as a single option and is never written from here.
    """

    @staticmethod
    def get_option(name: str, default: Any = None) -> Any:
        option = get_or_none(Option.objects, name=name)
        if option is None or option.value is None:
            return default
        return option.value

    @staticmethod
    def get_program_site_map() -> ProgramSiteMap:
        program_site_map = ProgramSiteService.get_option(PROGRAM_SITE_MAP_OPTION, {})
        return program_site_map if isinstance(program_site_map, dict) else {}

    @staticmethod
    def get_programs() -> list[str]:
        return list(ProgramSiteService.get_program_site_map().keys())

    @staticmethod
    def get_all_sites(sort: bool = False) -> list[str]:
        sites = []
        for program_sites in ProgramSiteService.get_program_site_map().values():
            if isinstance(program_sites, list):
                sites.extend(site for site in program_sites if site not in sites)
        return sorted(sites) if sort else sites

    @staticmethod
    def get_sites_for_program(program: str, sort: bool = False) -> list[str]:
        sites = ProgramSiteService.get_program_site_map().get(program) or []
        if not isinstance(sites, list):
            return []
        return sorted(set(sites)) if sort else sites
