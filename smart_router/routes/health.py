# This project was developed with assistance from AI tools.
"""Liveness endpoint."""

from fastapi import APIRouter

from .. import __version__

router = APIRouter()


@router.get("")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}
