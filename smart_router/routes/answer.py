# This project was developed with assistance from AI tools.
"""Smart answer endpoint used by the web UI.

Returns the routing decision alongside the answer. Generation failures come
back as a 200 with ``error`` set rather than as an HTTP error.
"""

from fastapi import APIRouter, Depends

from ..core.exceptions import ValidationError
from ..schemas.routing import AnswerRequest, SmartAnswer
from ..services.smart_router import SmartRouter, get_smart_router

router = APIRouter()


@router.post("/answer", response_model=SmartAnswer)
async def smart_answer(
    req: AnswerRequest,
    smart_router: SmartRouter = Depends(get_smart_router),
) -> SmartAnswer:
    if not req.query.strip():
        raise ValidationError("Query is required")
    return await smart_router.answer(req.query)
