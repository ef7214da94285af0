# This project was developed with assistance from AI tools.
"""OpenAI-compatible model listing.

Chat clients call ``GET /v1/models`` to populate their model picker. The
router advertises its own id first, then the backend models it routes to.
"""

from fastapi import APIRouter

from ..core.config import settings
from ..inference.config import get_router_config
from ..schemas.chat import ModelCard, ModelList

router = APIRouter()


@router.get("/models", response_model=ModelList)
async def list_models() -> ModelList:
    config = get_router_config()
    ids: list[str] = []
    for model_id in (settings.PUBLIC_MODEL_ID, config.fast_model, config.capable_model):
        if model_id not in ids:
            ids.append(model_id)
    return ModelList(data=[ModelCard(id=model_id) for model_id in ids])
