from typing import Annotated

from fastapi import Depends, Request

from chainscore.services.narrative import InsightNarrator


async def get_narrator(request: Request) -> InsightNarrator | None:
    """Inject the insight narrator from app.state (set during lifespan startup)."""
    return getattr(request.app.state, "narrator", None)


# Annotated type alias for clean endpoint signatures
Narrator = Annotated[InsightNarrator | None, Depends(get_narrator)]
