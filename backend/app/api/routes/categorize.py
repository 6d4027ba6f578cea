"""Item categorization route."""

from fastapi import APIRouter

from app.api.deps import CurrentUser
from app.schemas.lists import CategorizeRequest, CategorizeResponse
from app.services.categorizer import categorize_with_fallback

router = APIRouter(tags=["categorize"])


@router.post("/categorize-item", response_model=CategorizeResponse)
async def categorize_item(
    request: CategorizeRequest,
    current_user: CurrentUser,
) -> CategorizeResponse:
    """Suggest a category for an item name on a list of the given type."""
    category = await categorize_with_fallback(request.item_name, request.list_type)
    return CategorizeResponse(category=category)
