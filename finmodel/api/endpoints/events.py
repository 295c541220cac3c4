from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from finmodel.api import deps
from finmodel.events import EventBroadcaster, event_stream

router = APIRouter()


@router.get("/events")
async def stream_events(events: EventBroadcaster = Depends(deps.get_broadcaster)) -> StreamingResponse:
    """Long-lived stream of refresh notifications for the dashboard"""
    connection = events.connect()
    return StreamingResponse(
        event_stream(events, connection),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
