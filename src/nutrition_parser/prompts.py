"""System prompts for each parse mode."""

from nutrition_parser.domain.nutrition import ParseMode

_ITEM_SHAPE = (
    '{"name": string, "brand": string|null, "grams": number|null, '
    '"unit": "g"|"ml"|null, "calories": number|null, '
    '"proteinGrams": number|null, "fatGrams": number|null, '
    '"carbGrams": number|null}'
)

PRODUCT_PROMPT = (
    "You are a food product parser. Use web search when needed. "
    "Reply with exactly one JSON object: " + _ITEM_SHAPE + "."
)

RECIPE_PROMPT = (
    "You are a recipe parser. The user enters a dish name and its weight. "
    "Break the dish down into ingredients with realistic weights. "
    'Reply strictly with JSON: {"recipe": string, "totalGrams": number, '
    '"ingredients": [' + _ITEM_SHAPE + ", ...]}"
)

MEAL_PROMPT = (
    "You are a meal parser. Return the list of foods with their weights, "
    "calories and macros, plus totals. "
    'Strict JSON: {"mealName": string, "items": [' + _ITEM_SHAPE + ", ...], "
    '"totals": {"grams": number, "calories": number, "proteinGrams": number, '
    '"fatGrams": number, "carbGrams": number}}.'
)

# The calorie check below is an instruction to the model only.
BARCODE_PROMPT = (
    "You are a food product parser. Use only web search by barcode. "
    "Search for the product by its barcode first. "
    "If the barcode yields only a name and brand without calories and macros, "
    "search 'www.fatsecret.ru' by name and find calories and macros per 100 g. "
    "If the product is not found there, search other sites. "
    "If calories match 'calories = protein*4 + fat*9 + carbs*4 within 3%', "
    "take that result; otherwise keep searching until one matches. "
    "If no matching result exists, take the average macros of the results "
    "found so that calories = protein*4 + fat*9 + carbs*4 within 3%. "
    "Return ONLY one JSON object of the form: " + _ITEM_SHAPE + ". "
    "If the product is not found at all, or only its name is found without "
    'calories and macros, return {"notFound": true}. '
    "No text around it, no comments."
)

SYSTEM_PROMPTS: dict[ParseMode, str] = {
    ParseMode.PRODUCT: PRODUCT_PROMPT,
    ParseMode.RECIPE: RECIPE_PROMPT,
    ParseMode.MEAL: MEAL_PROMPT,
    ParseMode.BARCODE: BARCODE_PROMPT,
}


def system_prompt(mode: ParseMode) -> str:
    """Return the system prompt for a parse mode."""
    return SYSTEM_PROMPTS[mode]
