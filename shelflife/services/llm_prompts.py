"""LLM prompt templates for recipe suggestions."""

from shelflife.schemas.user import UserProfile

NO_RESTRICTIONS = "No restrictions"

# Gemini structured-output schema: exactly the five fields the model must fill.
# Time and difficulty are not requested; they are backfilled after parsing.
RECIPE_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "recipeName": {"type": "STRING"},
            "description": {"type": "STRING"},
            "servingSize": {"type": "STRING"},
            "ingredients": {"type": "ARRAY", "items": {"type": "STRING"}},
            "instructions": {"type": "ARRAY", "items": {"type": "STRING"}},
        },
        "required": ["recipeName", "description", "servingSize", "ingredients", "instructions"],
    },
}


def get_profile_requirements(profile: UserProfile | None) -> list[str]:
    """Turn a user profile into prompt requirement phrases."""
    if profile is None:
        return []

    requirements = []

    dietary = [pref for pref in profile.dietary_preferences if pref != NO_RESTRICTIONS]
    if dietary:
        requirements.append(f"dietary requirements: {', '.join(dietary)}")

    if profile.cooking_style:
        requirements.append(f"cooking style: {profile.cooking_style}")

    # A single-person household is the model's default, so it is not mentioned
    if profile.household_size and profile.household_size > 1:
        requirements.append(f"serves {profile.household_size} people")

    if profile.cooking_goals:
        requirements.append(f"focus on: {', '.join(profile.cooking_goals)}")

    return requirements


def get_recipe_suggestion_prompt(
    ingredient_names: list[str],
    profile: UserProfile | None = None,
) -> str:
    """Generate prompt asking for three recipes built around expiring ingredients.

    Args:
        ingredient_names: Names of the urgent pantry items, in urgency order
        profile: Optional cooking preferences of the user
    """
    if ingredient_names:
        prompt = (
            f"Create 3 recipes using these expiring ingredients: {', '.join(ingredient_names)}. "
            "Include common pantry items."
        )
    else:
        prompt = "Create 3 recipes using common pantry ingredients."

    requirements = get_profile_requirements(profile)
    if requirements:
        prompt += f" Requirements: {', '.join(requirements)}."

    prompt += (
        " Return JSON with recipeName, description, servingSize, ingredients[], instructions[]."
    )
    return prompt
