from decimal import ROUND_HALF_UP, Decimal, localcontext

from docuextract_analytics.modules.analytics.schemas import (
    Costs,
    PricingInfo,
    ProviderBreakdown,
    ProviderList,
    ProviderSummary,
    Report,
    Summary,
    UsageRecord,
)

CSV_HEADER = "Metric,Value"

_TWO_PLACES = Decimal("0.01")


def _format_average(value) -> str:
    # Decimal(float) is exact; halves round away from zero.
    average = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, average.adjusted() + 3)
        return str(average.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def _csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _provider_usage(provider) -> int:
    # Per-provider page counts are not reported by the gateway yet.
    return 0


def generate_report(
    usage: UsageRecord | dict,
    providers: ProviderList | dict,
    pricing: PricingInfo | dict,
) -> Report:
    usage = UsageRecord.model_validate(usage)
    provider_list = ProviderList.model_validate(providers)
    pricing = PricingInfo.model_validate(pricing)

    total_pages = usage.pages or 0
    total_requests = usage.requests or 0
    avg_pages_per_request = total_pages / total_requests if total_requests > 0 else 0

    total_cost = 0
    for provider in provider_list.providers:
        total_cost += _provider_usage(provider) * (provider.price_per_page or 0)

    tiers = pricing.volume_discounts
    return Report(
        summary=Summary(
            total_pages=total_pages,
            total_requests=total_requests,
            avg_pages_per_request=_format_average(avg_pages_per_request),
            current_discount=usage.current_discount,
            next_tier_threshold=usage.next_tier_threshold,
            progress_to_next_tier=usage.progress_to_next_tier,
        ),
        costs=Costs(
            total_cost=total_cost,
            discount_applied=usage.current_discount,
        ),
        providers=list(provider_list.providers),
        pricing_tiers=list(tiers) if tiers is not None else None,
    )


def get_provider_breakdown(providers: ProviderList | dict) -> ProviderBreakdown:
    provider_list = ProviderList.model_validate(providers)
    return ProviderBreakdown(
        providers=[
            ProviderSummary(
                name=p.name,
                enabled=p.enabled,
                price_per_page=p.price_per_page,
                routing_priority=p.routing_priority,
            )
            for p in provider_list.providers
        ]
    )


def to_csv(report: Report | dict) -> str:
    """Render the report summary as a two-column ``Metric,Value`` CSV.

    Always five lines (header plus four metrics), joined with ``\\n`` and
    without a trailing newline. A metric the gateway did not report renders
    as an empty value, so a missing discount gives ``Current Discount,%``.
    """
    summary = Report.model_validate(report).summary
    lines = [CSV_HEADER]
    lines.append(f"Total Pages,{_csv_value(summary.total_pages)}")
    lines.append(f"Total Requests,{_csv_value(summary.total_requests)}")
    lines.append(f"Avg Pages/Request,{summary.avg_pages_per_request}")
    lines.append(f"Current Discount,{_csv_value(summary.current_discount)}%")
    return "\n".join(lines)
