"""
Service dependencies - one service instance per request, built on the
store the app opened at startup.
"""

from fastapi import Depends

from placement_portal.db.mongodb import MongoStore, get_store
from placement_portal.services import (
    AccountService, AnalyticsService, ApplicationService, CompanyService
)


def get_account_service(store: MongoStore = Depends(get_store)) -> AccountService:
    return AccountService(store)


def get_company_service(store: MongoStore = Depends(get_store)) -> CompanyService:
    return CompanyService(store)


def get_application_service(store: MongoStore = Depends(get_store)) -> ApplicationService:
    return ApplicationService(store)


def get_analytics_service(store: MongoStore = Depends(get_store)) -> AnalyticsService:
    return AnalyticsService(store)
