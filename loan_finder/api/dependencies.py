"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from loan_finder.application.parsing import QueryParsingService
from loan_finder.application.search import LoanSearchService
from loan_finder.domain.catalog import LoanCatalog


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_search_service(request: Request) -> LoanSearchService:
    return request.app.state.search_service


def get_parsing_service(request: Request) -> QueryParsingService:
    return request.app.state.parsing_service


def get_catalog(request: Request) -> LoanCatalog:
    return request.app.state.catalog
