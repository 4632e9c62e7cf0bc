"""
Domain models (Pydantic).

These types represent the stable "contract" between the engine and its callers:
- listing input (`Property`, resolved once from whatever shape the store returns)
- normalization context (`ScoringContext`)
- personalization input (`SearchIntent`, `RankOptions`)
- outputs (`QualityBreakdown`, `RecommendationResult`, `QualityPage`)

Property records arrive from an external store in loosely-typed shapes
(`price.monthly` vs `monthlyPrice`, `_id` vs `id`, strings for numbers, NaN).
All of that is resolved here, at the boundary, so scorers can assume one shape.
Validators on `Property` coerce instead of rejecting: a malformed field becomes
its safe default.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from stayscore.core.numbers import optional_float, safe_float

logger = logging.getLogger(__name__)

_DATETIME_ADAPTER = TypeAdapter(datetime)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_text(value: Any) -> str:
    """Trim + lower-case, treating None as empty."""
    return _text(value).lower()


class Address(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    street: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    country: str = ""

    @field_validator("street", "city", "state", "pincode", "country", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)


class Price(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    monthly: float | None = None
    security: float | None = None

    @field_validator("monthly", "security", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float | None:
        return optional_float(value)

    @property
    def usable_monthly(self) -> float | None:
        """Monthly price if it can drive price scoring (finite and positive)."""
        if self.monthly is not None and self.monthly > 0:
            return self.monthly
        return None


class Property(BaseModel):
    """A read-only listing record; the engine never mutates it."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = ""
    title: str = ""
    description: str = ""
    rating: float | None = None
    price: Price = Field(default_factory=Price)
    views: int = 0
    bookings_count: int = Field(0, alias="bookingsCount")
    availability: str | None = None
    address: Address = Field(default_factory=Address)
    amenities: list[str] = Field(default_factory=list)
    ai_label: str | None = Field(None, alias="aiLabel")
    created_at: datetime | None = Field(None, alias="createdAt")

    @model_validator(mode="before")
    @classmethod
    def _resolve_shape(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        if not data.get("id") and data.get("_id") is not None:
            data["id"] = data["_id"]

        # Price shapes: {"price": {"monthly": n}}, {"monthlyPrice": n}, {"price": n}.
        price = data.get("price")
        if isinstance(price, Price):
            pass
        elif isinstance(price, Mapping):
            monthly = price.get("monthly")
            if monthly is None:
                monthly = data.get("monthlyPrice")
            data["price"] = {"monthly": monthly, "security": price.get("security")}
        else:
            monthly = data.get("monthlyPrice")
            if monthly is None:
                monthly = price
            data["price"] = {"monthly": monthly}

        address = data.get("address")
        if not isinstance(address, (Mapping, Address)):
            data["address"] = {"city": data.get("city")}
        return data

    @field_validator("id", "title", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float | None:
        return optional_float(value)

    @field_validator("views", "bookings_count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return max(0, int(safe_float(value)))

    @field_validator("availability", mode="before")
    @classmethod
    def _coerce_availability(cls, value: Any) -> str | None:
        text = normalize_text(value)
        return text or None

    @field_validator("amenities", mode="before")
    @classmethod
    def _coerce_amenities(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple, set, frozenset)):
            return []
        return [t for t in (_text(v) for v in value) if t]

    @field_validator("ai_label", mode="before")
    @classmethod
    def _coerce_label(cls, value: Any) -> str | None:
        text = _text(value)
        return text or None

    @field_validator("address", mode="before")
    @classmethod
    def _coerce_address(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, value: Any) -> datetime | None:
        if value is None or value == "":
            return None
        try:
            return _DATETIME_ADAPTER.validate_python(value)
        except ValidationError:
            return None


def coerce_property(record: Any) -> Property:
    """Resolve any record shape into a `Property` without raising."""
    if isinstance(record, Property):
        return record
    if not isinstance(record, Mapping):
        logger.debug("Ignoring non-mapping property record of type %s", type(record).__name__)
        return Property()
    try:
        return Property.model_validate(record)
    except ValidationError as exc:
        logger.debug("Falling back to an empty property for malformed record: %s", exc)
        return Property()


class ScoringContext(BaseModel):
    """Dataset-relative normalization bounds (all optional; defaults apply at use time)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    min_price: float | None = None
    max_price: float | None = None
    reference_price: float | None = None
    max_views: float | None = None
    max_bookings_count: float | None = None
    average_price: float | None = None
    average_views: float | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float | None:
        return optional_float(value)

    @property
    def has_price_range(self) -> bool:
        return (
            self.min_price is not None
            and self.max_price is not None
            and self.max_price > self.min_price
        )


class SearchIntent(BaseModel):
    """The single most recent city/query pair a user searched with."""

    model_config = ConfigDict(frozen=True)

    city: str = ""
    query: str = ""
    at: int = 0

    @field_validator("city", "query", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> str:
        return normalize_text(value)

    @field_validator("at", mode="before")
    @classmethod
    def _coerce_at(cls, value: Any) -> int:
        return max(0, int(safe_float(value)))

    @property
    def is_empty(self) -> bool:
        return not (self.city or self.query)


class RankOptions(BaseModel):
    """Personalization context for one ranking call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user: Any | None = None
    favorite_ids: frozenset[str] = Field(default_factory=frozenset)
    search_intent: SearchIntent | None = None
    limit: int | None = None
    mode: Literal["auto", "preview"] = "auto"

    @field_validator("favorite_ids", mode="before")
    @classmethod
    def _coerce_favorites(cls, value: Any) -> frozenset[str]:
        if value is None or isinstance(value, (str, bytes)):
            return frozenset()
        try:
            return frozenset(str(v) for v in value if v is not None)
        except TypeError:
            return frozenset()

    @field_validator("search_intent", mode="before")
    @classmethod
    def _coerce_intent(cls, value: Any) -> Any:
        if isinstance(value, (SearchIntent, Mapping)):
            return value
        return None

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, value: Any) -> int | None:
        number = optional_float(value)
        if number is None or number < 1:
            return None
        return int(number)

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> str:
        return "preview" if normalize_text(value) == "preview" else "auto"


class ScoreComponent(BaseModel):
    """One explainable quality sub-score (rating/price/demand/availability)."""

    name: Literal["rating", "price", "demand", "availability"]
    score: float = Field(..., ge=0, le=1)
    weight: float = Field(..., ge=0, le=1)
    contribution: float = Field(..., ge=0, le=1)
    details: dict[str, Any] = Field(default_factory=dict)
    reasons: list[str] = Field(default_factory=list)


class QualityBreakdown(BaseModel):
    """Explainable breakdown of a property's quality score."""

    property_id: str
    total_score: int = Field(..., ge=0, le=100)
    components: list[ScoreComponent]


class RecommendationResult(BaseModel):
    """One personalized recommendation with its presentation hints."""

    property: Property
    match_percent: int = Field(..., ge=0, le=100)
    reason_tag: str
    explanation: str
    cue_label: str
    cue_tone: str = ""
    preview: bool = False


class ScoredProperty(BaseModel):
    """One quality-ranked listing item."""

    property: Property
    score: int = Field(..., ge=0, le=100)
    ai_label: str


class QualityPage(BaseModel):
    """One page of the quality-ranked listing plus dataset statistics."""

    properties: list[ScoredProperty]
    total: int
    total_pages: int
    page: int
    average_price: float
    max_price: float
    views_threshold: float
