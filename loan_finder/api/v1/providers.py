"""AI provider management - current provider, switching and diagnostics"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from loan_finder.api.dependencies import get_parsing_service
from loan_finder.api.v1.schemas import (
    AllDiagnosticsResponse,
    DiagnosticsResponse,
    ProviderInfoResponse,
    RecommendationSchema,
    SwitchProviderRequest,
)
from loan_finder.application.parsing import QueryParsingService

logger = logging.getLogger(__name__)

router = APIRouter()


def _provider_info(parsing_service: QueryParsingService) -> ProviderInfoResponse:
    info = parsing_service.current_provider_info()
    recommendation = parsing_service.recommendations()
    return ProviderInfoResponse(
        type=info.type.value,
        is_configured=info.is_configured,
        language=info.language.value,
        recommendation=RecommendationSchema(
            primary=recommendation.primary.value,
            fallback=recommendation.fallback.value,
            reasoning=recommendation.reasoning,
        ),
        available=[provider_type.value for provider_type in parsing_service.registry.available_types()],
    )


@router.get("/providers", response_model=ProviderInfoResponse)
def get_current_provider(parsing_service: QueryParsingService = Depends(get_parsing_service)):
    return _provider_info(parsing_service)


@router.post("/providers/switch", response_model=ProviderInfoResponse)
def switch_provider(
    request_body: SwitchProviderRequest,
    parsing_service: QueryParsingService = Depends(get_parsing_service),
):
    """Make another provider active for subsequent parses"""
    try:
        parsing_service.switch_provider(request_body.provider)
    except ValueError as e:
        logger.warning(f"Provider switch rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return _provider_info(parsing_service)


@router.get("/providers/diagnostics", response_model=DiagnosticsResponse)
async def get_diagnostics(parsing_service: QueryParsingService = Depends(get_parsing_service)):
    """Self-check of the active provider (credential format, then a live probe)"""
    diagnostics = await parsing_service.get_diagnostics()
    return DiagnosticsResponse.from_diagnostics(diagnostics)


@router.get("/providers/diagnostics/all", response_model=AllDiagnosticsResponse)
async def get_all_diagnostics(parsing_service: QueryParsingService = Depends(get_parsing_service)):
    report = await parsing_service.get_all_diagnostics()
    return AllDiagnosticsResponse(
        providers={
            provider_type.value: DiagnosticsResponse.from_diagnostics(diagnostics)
            for provider_type, diagnostics in report.items()
        }
    )
