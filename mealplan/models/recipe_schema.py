from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNTITLED_RECIPE = "Untitled Recipe"
INGREDIENTS_PLACEHOLDER = "See source recipe for ingredients"


class RawRecipePayload(BaseModel):
    """schema.org/Recipe fields as captured by the chef indexer.

    Every field is optional and loosely typed; unknown keys are kept.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    schema_type: Optional[Any] = Field(default=None, alias="@type")
    name: Optional[Any] = None
    category: Optional[Any] = Field(default=None, alias="recipeCategory")
    total_time: Optional[Any] = Field(default=None, alias="totalTime")
    prep_time: Optional[Any] = Field(default=None, alias="prepTime")
    cook_time: Optional[Any] = Field(default=None, alias="cookTime")
    recipe_yield: Optional[Any] = Field(default=None, alias="recipeYield")
    ingredients: Optional[Any] = Field(default=None, alias="recipeIngredient")
    instructions: Optional[Any] = Field(default=None, alias="recipeInstructions")
    nutrition: Optional[Any] = None


class RawRecipeRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    source_url: str = Field(default="", alias="sourceUrl")
    chef: str = ""
    domain: str = ""
    indexed_at: str = Field(default="", alias="indexedAt")
    recipe: RawRecipePayload

    @field_validator("id", mode="before")
    @classmethod
    def _id_required(cls, v):
        if isinstance(v, bool):
            raise ValueError("id must be a string")
        if isinstance(v, (int, float)):
            v = str(v)
        if not isinstance(v, str) or not v.strip():
            raise ValueError("id must be a non-empty string")
        return v

    @field_validator("source_url", "chef", "domain", "indexed_at", mode="before")
    @classmethod
    def _blank_if_missing(cls, v):
        if isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return ""


class Chef(str, Enum):
    JAMIE_OLIVER = "jamie_oliver"
    RECIPE_TIN_EATS = "recipe_tin_eats"


class KnownChef(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["known"] = "known"
    slug: Chef


class OtherChef(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["other"] = "other"
    raw: str


ChefRef = Annotated[Union[KnownChef, OtherChef], Field(discriminator="kind")]


class ParsedIngredient(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["parsed"] = "parsed"
    qty: float
    unit: Optional[str] = None
    name: str


class UnparsedIngredient(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["unparsed"] = "unparsed"
    raw_text: str = Field(alias="rawText")

    @property
    def name(self) -> str:
        return self.raw_text


IngredientLine = Annotated[Union[ParsedIngredient, UnparsedIngredient], Field(discriminator="kind")]


class RecipeSource(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    domain: str
    chef: ChefRef
    license: Literal["permitted"] = "permitted"
    fetched_at: str = Field(alias="fetchedAt")


class Recipe(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    source: RecipeSource
    time_mins: int = Field(alias="timeMins", ge=0)
    serves: int = Field(ge=1)
    tags: List[str] = Field(default_factory=list)
    ingredients: List[IngredientLine] = Field(min_length=1)
    cost_per_serve_est: float = Field(alias="costPerServeEst", gt=0)

    def to_catalogue_dict(self) -> dict:
        """Serialized catalogue form (camelCase keys, JSON-safe values)."""
        return self.model_dump(mode="json", by_alias=True)
