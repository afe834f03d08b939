from dataclasses import dataclass

from retail_api.core.services.database import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
