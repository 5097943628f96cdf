from fastapi import APIRouter, Depends, Header, HTTPException, Request
from starlette.concurrency import run_in_threadpool
from app.context import ServiceContext, get_context
from app.models.schemas import CardTemplateResponse, CardUploadResponse
from app.utils.errors import CardNotFoundError, InvalidReferenceError
from app.utils.logger import logger

router = APIRouter(tags=["Cards"])

INTERNAL_ERROR_DETAIL = "An internal error occurred while processing the request."


def _to_http_error(e: Exception, action: str) -> HTTPException:
    """Map service errors to responses without exposing internal detail."""
    if isinstance(e, InvalidReferenceError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, CardNotFoundError):
        return HTTPException(status_code=404, detail="Card not found")
    logger.error(f"{action} failed: {type(e).__name__}: {str(e)}")
    return HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)


@router.post("/cards", response_model=CardUploadResponse, response_model_by_alias=True)
async def upload_card(
    request: Request,
    card_name: str = Header(...),
    context: ServiceContext = Depends(get_context),
):
    """
    Store the raw request body as a card image and record its name.
    """
    image_data = await request.body()
    if not image_data:
        raise HTTPException(status_code=400, detail="Card image body cannot be empty")

    try:
        card_id = await run_in_threadpool(context.cards.upload_card, image_data, card_name)
    except Exception as e:
        raise _to_http_error(e, "Card upload")
    return CardUploadResponse(card_id=card_id)


async def _lookup(card_id: str, context: ServiceContext) -> CardTemplateResponse:
    try:
        return await run_in_threadpool(context.cards.get_card, card_id)
    except Exception as e:
        raise _to_http_error(e, f"Card lookup for {card_id}")


@router.get("/cards", response_model=CardTemplateResponse, response_model_by_alias=True)
async def get_card(
    card_id: str = Header(...),
    context: ServiceContext = Depends(get_context),
):
    """
    Return the card's name and a signed URL valid for the configured window.
    """
    return await _lookup(card_id, context)


@router.get("/cards/{card_id}", response_model=CardTemplateResponse, response_model_by_alias=True)
async def get_card_by_path(card_id: str, context: ServiceContext = Depends(get_context)):
    return await _lookup(card_id, context)
