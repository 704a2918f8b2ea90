from fastapi import APIRouter, Depends, HTTPException

from stockwatch.core.errors import SourceUnavailable
from stockwatch.schemas.scan import ScanRequest, ScanRunRead
from stockwatch.services.scan_service import build_orchestrator

router = APIRouter(prefix="/scans", tags=["Scans"])


def get_orchestrator():
    return build_orchestrator()


@router.post("/run", response_model=ScanRunRead)
def run_scan_now(payload: ScanRequest, orchestrator=Depends(get_orchestrator)):
    try:
        report = orchestrator.run_scan(
            payload.check_type,
            window_days=payload.window_days,
            timeout_seconds=payload.timeout_seconds,
        )
    except SourceUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ScanRunRead.model_validate(report, from_attributes=True)
