from fastapi import APIRouter, Depends, HTTPException, Query
from ..schemas import UnitsResponse
from ..services.units_service import UnitsService
from ..core.security import require_api_key, rate_limit

router = APIRouter()

def service_dep() -> UnitsService:
    # Clients are stateless (one httpx client per call), so per-request is fine.
    return UnitsService()

@router.get("/report/units", response_model=UnitsResponse)
async def get_units(
    address: str = Query(..., description="Free-text French address"),
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    svc: UnitsService = Depends(service_dep),
):
    """
    Past sales (DVF) recorded at the given address, newest first.
    An empty `units` list means no comparable sale was found.
    """
    if not address.strip():
        raise HTTPException(status_code=400, detail="Address is required")
    return await svc.lookup(address.strip())
