from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Basic health check"""
    aggregator = getattr(request.app.state, "rate_aggregator", None)
    providers = [provider.provider_code for provider in aggregator.providers] if aggregator else []
    return {
        "status": "healthy",
        "service": "Freight Rates",
        "providers": providers,
    }
