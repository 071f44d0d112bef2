from fastapi import APIRouter, Depends, HTTPException, Query
from ..schemas import DpeResponse
from ..services.dpe_service import DpeService
from ..core.security import require_api_key, rate_limit

router = APIRouter()

def service_dep() -> DpeService:
    return DpeService()

@router.get("/dpe/search", response_model=DpeResponse)
async def search_dpe(
    address: str = Query(...),
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    svc: DpeService = Depends(service_dep),
):
    if not address.strip():
        raise HTTPException(status_code=400, detail="Address is required")
    return await svc.lookup(address.strip())
