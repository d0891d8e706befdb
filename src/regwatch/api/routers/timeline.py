from fastapi import APIRouter, Depends, Request

from regwatch.api.deps import get_timeline_service
from regwatch.timeline.service import TimelineService

router = APIRouter(prefix="/timeline", tags=["Timeline"])

@router.get("")
def get_timeline(request: Request, svc: TimelineService = Depends(get_timeline_service)):
    """
    Loads the timeline. A failed load still answers 200 with the fallback
    dataset; `error` carries the notice and `usingFallback` is true.
    """
    result = svc.load_timeline()
    request.state.using_fallback = result.using_fallback
    return result.to_payload()
