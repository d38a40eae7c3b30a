"""
Services module - business logic over the MongoDB collections.

Each service is built from the app's MongoStore:
    AccountService(store), CompanyService(store),
    ApplicationService(store), AnalyticsService(store)
"""

from placement_portal.services.account_service import AccountService
from placement_portal.services.analytics_service import AnalyticsService
from placement_portal.services.application_service import ApplicationService
from placement_portal.services.company_service import CompanyService

__all__ = ["AccountService", "AnalyticsService", "ApplicationService", "CompanyService"]
