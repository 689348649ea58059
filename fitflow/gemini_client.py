"""
FitFlow — Gemini API Client
Nutrition estimates for a food photo or a free-text description.

A single attempt per request: any failure (no key, network, HTTP error,
unreadable answer) raises FoodAnalysisError and the caller keeps whatever
the user already typed.
"""
import base64
import json

import requests

from fitflow.config import GEMINI_IMAGE_MODEL, GEMINI_MODEL, GEMINI_TIMEOUT, get_api_key

BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

FOOD_ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "foodName": {"type": "STRING", "description": "Name of the food in Russian language"},
        "calories": {"type": "NUMBER"},
        "protein": {"type": "NUMBER", "description": "in grams"},
        "fat": {"type": "NUMBER", "description": "in grams"},
        "carbs": {"type": "NUMBER", "description": "in grams"},
        "estimatedWeightGrams": {"type": "NUMBER"},
    },
    "required": ["foodName", "calories", "protein", "fat", "carbs", "estimatedWeightGrams"],
}

IMAGE_PROMPT = (
    "Analyze this food image. Identify the main dish. Estimate the calories, protein, "
    "fat, and carbs for the portion shown. Return strictly JSON. "
    "IMPORTANT: The 'foodName' field MUST be in Russian language."
)

TEXT_PROMPT = (
    'Analyze this food description: "{text}". '
    "Identify the main dish. "
    "Estimate the nutritional values (calories, protein, fat, carbs) for the portion described. "
    "If no portion is specified, assume 100 grams. "
    "Return strictly JSON. "
    "IMPORTANT: The 'foodName' field MUST be in Russian language."
)

THUMBNAIL_PROMPT = (
    "Create a realistic, appetizing, square food photography thumbnail of {name}. "
    "Professional lighting, dark background, top-down view. High quality."
)


class FoodAnalysisError(RuntimeError):
    """The food could not be analyzed."""


def _post(model: str, body: dict) -> dict:
    """POST generateContent for `model`. No retry."""
    key = get_api_key()
    if not key:
        raise FoodAnalysisError("No Gemini API key configured")
    try:
        r = requests.post(
            f"{BASE_URL}/models/{model}:generateContent",
            headers={"x-goog-api-key": key, "Content-Type": "application/json"},
            json=body,
            timeout=GEMINI_TIMEOUT,
        )
        r.raise_for_status()
        return r.json()
    except requests.exceptions.RequestException as e:
        raise FoodAnalysisError(f"Gemini request failed: {e}") from e
    except ValueError as e:
        raise FoodAnalysisError(f"Gemini returned a non-JSON response: {e}") from e


def _response_parts(data: dict) -> list[dict]:
    candidates = data.get("candidates") or []
    if not candidates:
        return []
    return (candidates[0].get("content") or {}).get("parts") or []


def _parse_analysis(data: dict) -> dict:
    text = "".join(p.get("text", "") for p in _response_parts(data))
    if not text:
        raise FoodAnalysisError("Gemini returned an empty answer")
    try:
        result = json.loads(text)
    except json.JSONDecodeError as e:
        raise FoodAnalysisError(f"Gemini answer is not JSON: {e}") from e
    if not isinstance(result, dict):
        raise FoodAnalysisError("Gemini answer is not a JSON object")
    return result


def _analysis_config() -> dict:
    return {
        "responseMimeType": "application/json",
        "responseSchema": FOOD_ANALYSIS_SCHEMA,
    }


def analyze_food_image(image: bytes | str, mime_type: str = "image/jpeg") -> dict:
    """
    Estimate nutrition for a food photo.

    `image` is raw bytes or already base64-encoded text (a data URL prefix
    is stripped). Returns {foodName, calories, protein, fat, carbs,
    estimatedWeightGrams}.
    """
    if isinstance(image, bytes):
        data = base64.b64encode(image).decode("ascii")
    else:
        data = image.split(",", 1)[1] if image.startswith("data:") else image

    body = {
        "contents": [{
            "parts": [
                {"inlineData": {"mimeType": mime_type, "data": data}},
                {"text": IMAGE_PROMPT},
            ]
        }],
        "generationConfig": _analysis_config(),
    }
    return _parse_analysis(_post(GEMINI_MODEL, body))


def analyze_food_text(description: str) -> dict:
    """Same as analyze_food_image, from a description like "овсянка 200 г"."""
    body = {
        "contents": [{"parts": [{"text": TEXT_PROMPT.format(text=description)}]}],
        "generationConfig": _analysis_config(),
    }
    return _parse_analysis(_post(GEMINI_MODEL, body))


def generate_food_thumbnail(food_name: str) -> str:
    """Generated picture of the dish as a data URL."""
    body = {"contents": [{"parts": [{"text": THUMBNAIL_PROMPT.format(name=food_name)}]}]}
    data = _post(GEMINI_IMAGE_MODEL, body)
    for part in _response_parts(data):
        inline = part.get("inlineData")
        if inline:
            mime = inline.get("mimeType") or "image/png"
            return f"data:{mime};base64,{inline['data']}"
    raise FoodAnalysisError("Gemini returned no image")
