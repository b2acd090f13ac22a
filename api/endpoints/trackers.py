import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from api.schemas import MessageOut, ProbeDraft, ProbeResult, TrackerIn, TrackerOut
from core.auth import RequestContext, get_request_context
from core.db import get_session
from core.errors import ProbeCancelled
from services.probe import ContentProbe
from services.trackers import TrackerRepository

logger = logging.getLogger("pagewatch.trackers")

DISCONNECT_POLL_SECONDS = 0.5

router = APIRouter()


def get_repository(s: Session = Depends(get_session)) -> TrackerRepository:
    return TrackerRepository(s)


def get_probe(request: Request) -> ContentProbe:
    return request.app.state.probe


async def _cancel_on_disconnect(request: Request, coro):
    """Run ``coro`` but cancel it as soon as the client hangs up."""
    task = asyncio.ensure_future(coro)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("client left during %s, cancelling probe", request.url.path)
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
                raise ProbeCancelled()
    finally:
        if not task.done():
            task.cancel()


@router.post("/test", response_model=ProbeResult)
async def test_tracker(
    body: ProbeDraft,
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    probe: ContentProbe = Depends(get_probe),
):
    result = await _cancel_on_disconnect(
        request, probe.run(body.website_url, body.selector, body.compare_mode)
    )
    return ProbeResult(result=result)


@router.post("", response_model=TrackerOut)
def create_tracker(
    body: TrackerIn,
    ctx: RequestContext = Depends(get_request_context),
    repo: TrackerRepository = Depends(get_repository),
):
    return repo.create(ctx.user.id, body)


@router.get("", response_model=List[TrackerOut])
def list_trackers(
    ctx: RequestContext = Depends(get_request_context),
    repo: TrackerRepository = Depends(get_repository),
):
    return repo.list_by_owner(ctx.user.id)


@router.get("/{tracker_id}", response_model=TrackerOut)
def get_tracker(
    tracker_id: int,
    ctx: RequestContext = Depends(get_request_context),
    repo: TrackerRepository = Depends(get_repository),
):
    return repo.get_by_id(ctx.user.id, tracker_id)


@router.put("/{tracker_id}", response_model=TrackerOut)
def update_tracker(
    tracker_id: int,
    body: TrackerIn,
    ctx: RequestContext = Depends(get_request_context),
    repo: TrackerRepository = Depends(get_repository),
):
    return repo.update(ctx.user.id, tracker_id, body)


@router.delete("/{tracker_id}", response_model=MessageOut)
def delete_tracker(
    tracker_id: int,
    ctx: RequestContext = Depends(get_request_context),
    repo: TrackerRepository = Depends(get_repository),
):
    repo.delete(ctx.user.id, tracker_id)
    return MessageOut(message="Tracker deleted successfully")
