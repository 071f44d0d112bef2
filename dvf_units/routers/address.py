from fastapi import APIRouter, Depends, Query
from ..schemas import AddressSearchResponse
from ..services.address_service import AddressService
from ..core.security import require_api_key, rate_limit

router = APIRouter()

def service_dep() -> AddressService:
    return AddressService()

@router.get("/address/search", response_model=AddressSearchResponse)
async def search_address(
    q: str = Query(..., description="Partial address typed by the user"),
    limit: int = Query(5, ge=1, le=20),
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    svc: AddressService = Depends(service_dep),
):
    results, from_cache = await svc.suggest(q, limit=limit)
    return {"query": q, "results": results, "cached": from_cache}
