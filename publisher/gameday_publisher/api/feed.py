"""Admin endpoint for regenerating the feed on demand."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from ..logging import logger
from ..services.feed_generator import FeedGenerator
from ..services.feed_runner import build_feed_generator, run_feed_generation
from .auth import verify_api_key

router = APIRouter(prefix="/admin/feed", dependencies=[Depends(verify_api_key)])


class RegenerateResponse(BaseModel):
    ok: bool
    exit_code: int
    stdout: str


def get_feed_generator() -> FeedGenerator:
    return build_feed_generator()


@router.post("/regenerate", response_model=RegenerateResponse)
def regenerate_feed(
    response: Response,
    generator: FeedGenerator = Depends(get_feed_generator),
) -> RegenerateResponse:
    """Run the generator now instead of waiting for the next scheduled tick."""
    result = run_feed_generation(generator)
    logger.info("manual_feed_run", ok=result.ok, exit_code=result.exit_code)
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    return RegenerateResponse(ok=result.ok, exit_code=result.exit_code, stdout=result.stdout)
