"""Canned recipes used when the generation API is unavailable."""

from shelflife.models.enums import Difficulty
from shelflife.schemas.recipe import RecipeSuggestion
from shelflife.schemas.user import UserProfile

DEFAULT_SERVING_SIZE = "Serves 2-3"
MEAT_FREE_DIETS = {"Vegetarian", "Vegan"}
DAIRY_FREE_DIETS = {"Vegetarian", "Vegan", "Dairy-free"}
GLUTEN_FREE_DIET = "Gluten-free"

CHEESE_SUBSTITUTE = "Nutritional yeast or herbs"
PASTA_SUBSTITUTE = "Gluten-free pasta"

FALLBACK_TEMPLATES = [
    {
        "recipe_name": "Quick Stir Fry",
        "description": "A fast and healthy way to use up vegetables and proteins.",
        "ingredients": [
            "Available vegetables",
            "2 tbsp oil",
            "2 cloves garlic",
            "Soy sauce",
            "Rice or noodles",
        ],
        "instructions": [
            "Heat oil in pan",
            "Add garlic and vegetables",
            "Stir-fry for 5-7 minutes",
            "Add soy sauce",
            "Serve over rice",
        ],
        "estimated_time": "15 min",
    },
    {
        "recipe_name": "Simple Soup",
        "description": "Comforting soup using whatever vegetables you have on hand.",
        "ingredients": [
            "Available vegetables",
            "4 cups broth",
            "1 onion",
            "Salt and pepper",
            "Herbs",
        ],
        "instructions": [
            "Sauté onion",
            "Add vegetables and broth",
            "Simmer 20 minutes",
            "Season to taste",
            "Serve hot",
        ],
        "estimated_time": "25 min",
    },
    {
        "recipe_name": "Pantry Pasta",
        "description": "Use up ingredients in a satisfying pasta dish.",
        "ingredients": [
            "8 oz pasta",
            "Available proteins/vegetables",
            "2 tbsp olive oil",
            "Garlic",
            "Parmesan cheese",
        ],
        "instructions": [
            "Cook pasta",
            "Sauté garlic and ingredients",
            "Combine with pasta",
            "Add cheese",
            "Serve immediately",
        ],
        "estimated_time": "20 min",
    },
]


def filter_ingredients(ingredients: list[str], dietary_preferences: set[str]) -> list[str]:
    """Adjust a canned ingredient list for the user's diet."""
    result = list(ingredients)

    if dietary_preferences & MEAT_FREE_DIETS:
        result = [ing for ing in result if "protein" not in ing.lower()]

    if dietary_preferences & DAIRY_FREE_DIETS:
        result = [CHEESE_SUBSTITUTE if "cheese" in ing.lower() else ing for ing in result]

    if GLUTEN_FREE_DIET in dietary_preferences:
        result = [PASTA_SUBSTITUTE if "pasta" in ing.lower() else ing for ing in result]

    return result


def get_fallback_recipes(
    profile: UserProfile | None = None,
    triggered_by: list[str] | None = None,
) -> list[RecipeSuggestion]:
    """Build the three fallback recipes for a user.

    Always returns exactly three recipes with every field populated.
    """
    if profile is not None and profile.household_size:
        serving_size = f"Serves {profile.household_size}"
    else:
        serving_size = DEFAULT_SERVING_SIZE
    diets = set(profile.dietary_preferences) if profile is not None else set()

    return [
        RecipeSuggestion(
            recipe_name=template["recipe_name"],
            description=template["description"],
            serving_size=serving_size,
            ingredients=filter_ingredients(template["ingredients"], diets),
            instructions=list(template["instructions"]),
            estimated_time=template["estimated_time"],
            difficulty=Difficulty.EASY,
            triggered_by=list(triggered_by or []),
        )
        for template in FALLBACK_TEMPLATES
    ]
