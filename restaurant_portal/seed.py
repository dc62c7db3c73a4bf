"""
Development Seed Data

Sample bar catalog and branch used by the mock catalog source and
loaded into an empty database when the API starts in development mode.
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_portal.models import Branch, BranchUnavailableIngredient, Ingredient

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_ID = "downtown"
DEFAULT_BRANCH_NAME = "Downtown"

DEFAULT_INGREDIENTS = [
    {"ingredientName": "Lime", "description": "Fresh limes, juiced to order.", "imagePath": "/images/lime.jpg"},
    {"ingredientName": "Gin", "description": "London dry gin.", "imagePath": "/images/gin.jpg"},
    {"ingredientName": "Mint", "description": "Spearmint sprigs.", "imagePath": "/images/mint.jpg"},
    {"ingredientName": "Tonic Water", "description": "Indian tonic water.", "imagePath": "/images/tonic.jpg"},
    {"ingredientName": "White Rum", "description": "Light Caribbean rum.", "imagePath": "/images/rum.jpg"},
    {"ingredientName": "Simple Syrup", "description": "Equal parts sugar and water.", "imagePath": None},
    {"ingredientName": "Angostura Bitters", "description": "Aromatic bitters.", "imagePath": None},
    {"ingredientName": "Crème de Cassis", "description": "Blackcurrant liqueur.", "imagePath": None},
    {"ingredientName": "espresso", "description": "Double shot, pulled fresh.", "imagePath": "/images/espresso.jpg"},
    {"ingredientName": "Vodka", "description": "Grain vodka.", "imagePath": "/images/vodka.jpg"},
]

DEFAULT_UNAVAILABLE = ["Gin"]


def default_branch_record() -> dict:
    """The seeded branch in /currentBranch wire shape."""
    return {
        "_id": DEFAULT_BRANCH_ID,
        "name": DEFAULT_BRANCH_NAME,
        "unavailableIngredients": [{"ingredientName": name} for name in DEFAULT_UNAVAILABLE],
    }


async def seed_database(session: AsyncSession) -> bool:
    """
    Insert the sample catalog and branch if the catalog is empty.

    Returns:
        bool: True if anything was inserted
    """
    count = (await session.execute(select(func.count(Ingredient.id)))).scalar() or 0
    if count:
        return False

    for item in DEFAULT_INGREDIENTS:
        session.add(Ingredient(
            ingredient_name=item["ingredientName"],
            description=item["description"],
            image_path=item["imagePath"],
        ))
    # Branch rows reference ingredient names
    await session.flush()

    branch = Branch(id=DEFAULT_BRANCH_ID, name=DEFAULT_BRANCH_NAME)
    branch.unavailable_ingredients = [
        BranchUnavailableIngredient(ingredient_name=name) for name in DEFAULT_UNAVAILABLE
    ]
    session.add(branch)
    await session.commit()

    logger.info(f"Seeded {len(DEFAULT_INGREDIENTS)} ingredients and branch '{DEFAULT_BRANCH_ID}'")
    return True
