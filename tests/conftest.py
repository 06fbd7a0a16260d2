import copy

import pytest


class FakeClock:
    """Controllable epoch-seconds clock for ProductCache."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


RAW_RECORD = {
    "id": "nagi-chicken-piccata",
    "sourceUrl": "https://www.recipetineats.com/chicken-piccata/",
    "chef": "nagi",
    "domain": "recipetineats.com",
    "indexedAt": "2025-01-10T08:00:00.000Z",
    "recipe": {
        "@type": "Recipe",
        "name": "Chicken Piccata",
        "recipeCategory": ["Main Course", "Chicken & Poultry"],
        "totalTime": "PT35M",
        "recipeYield": ["4", "4 servings"],
        "recipeIngredient": [
            "2 chicken breasts",
            "1/2 cup flour",
            "3 tbsp butter",
            "Salt and pepper",
        ],
        "recipeInstructions": [{"@type": "HowToStep", "text": "Cook it."}],
    },
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def raw_record():
    return copy.deepcopy(RAW_RECORD)
