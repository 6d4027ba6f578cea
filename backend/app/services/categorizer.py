"""Assign a taxonomy category to a free-text list item name."""

import logging

from app.config import get_settings
from app.db.models import ListType
from app.errors import UpstreamServiceError
from app.services.list_types import KEYWORD_TABLES, LIST_TEMPLATES, SHOPPING_CATEGORIES
from app.services.llm_client import llm_client

logger = logging.getLogger(__name__)
settings = get_settings()

OTHER = "Other"

_SHOPPING_PROMPT = """You are a grocery store categorization expert. Categorize grocery items into these categories:

CATEGORIES:
- Produce: Fresh fruits, vegetables, herbs (apples, bananas, lettuce, tomatoes, etc.)
- Dairy: Milk, cheese, yogurt, butter, eggs, cream
- Meat: Fresh meat, poultry, fish, deli meats (chicken, beef, salmon, pastrami, etc.)
- Bakery: Bread, bagels, pastries, cakes, muffins
- Frozen: Frozen foods, ice cream, frozen vegetables, frozen meals
- Beverages: Drinks including coffee, tea, soda, juice, water, alcohol
- Household: Cleaning supplies, toiletries, paper products, detergent
- Snacks: Chips, candy, cookies, crackers, nuts
- Pantry: Canned goods, pasta, rice, spices, condiments, oils
- Other: Items that don't fit the above categories

Respond with just the category name, nothing else. Be smart about context - for example:
- "French roast" = Beverages (coffee)
- "Coca-Cola, caffeine-free" = Beverages
- "french fries, frozen" = Frozen
- "pastrami" = Meat (deli meat)
- "pizza, frozen" = Frozen"""

_CANONICAL_SHOPPING = {c.lower(): c for c in SHOPPING_CATEGORIES}


def normalize_shopping_category(raw: str) -> str:
    """Map a model answer onto the ten shopping categories; anything else is Other."""
    cleaned = raw.strip().strip("\"'.").strip()
    return _CANONICAL_SHOPPING.get(cleaned.lower(), OTHER)


def categorize_locally(item_name: str, list_type: str) -> str:
    """
    Keyword-substring categorization, first match wins. No network.

    List types without a keyword table use their own taxonomy names as
    keywords and fall back to the template's catch-all category.
    """
    name = item_name.lower()

    table = KEYWORD_TABLES.get(list_type)
    if table is not None:
        for category, keywords in table.items():
            if any(keyword in name for keyword in keywords):
                return category
        return LIST_TEMPLATES[list_type].default_category

    template = LIST_TEMPLATES.get(list_type)
    if template is None:
        return OTHER
    for category in template.categories:
        if category.lower() in name:
            return category
    return template.default_category


async def categorize_remotely(item_name: str) -> str:
    """Ask the LLM for a shopping category. Raises UpstreamServiceError on failure."""
    answer = await llm_client.complete(
        _SHOPPING_PROMPT,
        [{"role": "user", "content": f'Categorize this grocery item: "{item_name}"'}],
        model=settings.categorizer_model,
        max_tokens=settings.categorizer_max_tokens,
        temperature=settings.categorizer_temperature,
    )
    category = normalize_shopping_category(answer)
    if category == OTHER and answer.strip().lower() != "other":
        logger.info("Categorizer answer %r for %r is not a known category", answer, item_name)
    return category


async def categorize(item_name: str, list_type: str) -> str:
    """
    Category for an item on a list of the given type.

    Shopping items go to the LLM; everything else is matched locally.
    Raises UpstreamServiceError if the remote call fails; callers that must
    not fail should use `categorize_with_fallback`.
    """
    if list_type == ListType.SHOPPING.value:
        return await categorize_remotely(item_name)
    return categorize_locally(item_name, list_type)


async def categorize_with_fallback(item_name: str, list_type: str) -> str:
    """Like `categorize`, but substitutes local keyword matching on remote failure."""
    try:
        return await categorize(item_name, list_type)
    except UpstreamServiceError:
        logger.warning(
            "Remote categorization failed for %r, using keyword fallback", item_name, exc_info=True
        )
        return categorize_locally(item_name, list_type)
