"""Typed shapes of the gateway documents and the aggregated report.

Attributes are snake_case; the wire format is the gateway's camelCase, so
every model accepts either spelling on input and dumps camelCase with
``model_dump(by_alias=True)``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

Number = int | float
Tier = Any


class GatewayModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UsageRecord(GatewayModel):
    pages: Number = 0
    requests: Number = 0
    current_discount: Number | None = None
    next_tier_threshold: Number | None = None
    progress_to_next_tier: Number | None = None

    @field_validator("pages", "requests", mode="before")
    @classmethod
    def _default_missing_count(cls, value):
        return 0 if value is None else value


class Provider(GatewayModel):
    # Unknown provider fields are passed through to the report untouched.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: str | None = None
    enabled: bool | None = None
    price_per_page: Number | None = None
    routing_priority: Number | None = None


class ProviderList(GatewayModel):
    providers: list[Provider]


class PricingInfo(GatewayModel):
    volume_discounts: list[Tier] | None = None


class Summary(GatewayModel):
    total_pages: Number
    total_requests: Number
    avg_pages_per_request: str
    current_discount: Number | None = None
    next_tier_threshold: Number | None = None
    progress_to_next_tier: Number | None = None


class Costs(GatewayModel):
    total_cost: Number = 0
    discount_applied: Number | None = None


class Report(GatewayModel):
    summary: Summary
    costs: Costs
    providers: list[Provider]
    pricing_tiers: list[Tier] | None = None


class ProviderSummary(GatewayModel):
    name: str | None = None
    enabled: bool | None = None
    price_per_page: Number | None = None
    routing_priority: Number | None = None


class ProviderBreakdown(GatewayModel):
    providers: list[ProviderSummary]
