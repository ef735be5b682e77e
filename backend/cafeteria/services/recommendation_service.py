# Overview: Rule-based recommendation functions; pure functions over orders, catalog, inventory and time.

"""
Recommendations

Nothing here touches the database or the clock: routes load the rows,
pass them in together with "now", and serialize the result. Same inputs,
same output.

- generate_insights: canned operator insights by time of day / weekday
- recommend_for_user: favourite-category heuristic with popular fallback
- inventory_recommendations: low stock, consumption and waste hints
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime
from typing import Iterable, Mapping, Sequence


RECOMMENDATION_LIMIT = 3

INSIGHT_KINDS = ("inventory", "menu", "marketing")

# Stock within 20% above threshold raises a warning
LOW_STOCK_MARGIN = 1.2

# Recent orders are assumed to cover one week
CONSUMPTION_WINDOW_DAYS = 7
UNUSED_DAYS_SENTINEL = 999
REORDER_HORIZON_DAYS = 14
WASTE_MAX_DAILY_USAGE = 0.5
WASTE_MIN_DAYS_OF_STOCK = 30


# =============================================================================
# TIME-BASED INSIGHTS
# =============================================================================

def _insight(title: str, description: str, impact: str, confidence: float, data: dict | None = None) -> dict:
    insight = {
        "title": title,
        "description": description,
        "impact": impact,
        "actionable": True,
        "confidence": confidence,
    }
    if data is not None:
        insight["data"] = data
    return insight


def _meal_period(hour: int) -> str:
    if 6 <= hour < 11:
        return "morning"
    if 11 <= hour < 15:
        return "lunch"
    return "evening"


_MENU_TIPS = {
    "morning": (
        "Increase Masala Dosa production - top seller during breakfast",
        "Add breakfast combo offers - potential 15% revenue increase",
    ),
    "lunch": (
        "Lunch thali demand is 30% higher than supply",
        "Offer quick-serve lunch options for students between classes",
    ),
    "evening": (
        "Offer evening snack bundles - customers commonly order vada with coffee",
        "Biryani demand increases by 40% after 7pm",
    ),
}


def generate_insights(kind: str, now: datetime) -> list[dict]:
    """
    Operator insights for kind in INSIGHT_KINDS, worded for the current
    meal period and weekday. Unknown kinds yield an empty list.
    """
    day = now.strftime("%A")

    if kind == "inventory":
        return [
            _insight(
                "Rice stock low",
                "Based on historical data, you'll need to restock rice soon. "
                "Current usage trends show you'll run out in about 3 days.",
                "high", 0.89,
                {"currentStock": 14, "dailyUsage": 4.7, "daysUntilEmpty": 3, "suggestedOrder": 25},
            ),
            _insight(
                "Order vegetables earlier",
                "Vegetable freshness analysis shows 15% waste. "
                "Order smaller batches more frequently to improve quality.",
                "medium", 0.76,
                {
                    "currentWaste": "15%",
                    "suggestedOrdering": "Every 2 days instead of weekly",
                    "estimatedSavings": "₹3,500 monthly",
                },
            ),
            _insight(
                "Milk consumption pattern shift",
                f"{day} consumption is 20% higher than other weekdays. Adjust ordering accordingly.",
                "medium", 0.83,
                {"weekdayAvg": "8 liters", "todayAvg": "9.6 liters", "adjustment": f"+20% for {day}"},
            ),
        ]

    if kind == "menu":
        first, second = _MENU_TIPS[_meal_period(now.hour)]
        return [
            _insight(first, "Real-time analysis of ordering patterns shows this opportunity.", "high", 0.91),
            _insight(second, "Based on customer behavior patterns from the last 30 days.", "medium", 0.85),
            _insight(
                f"{day} special promotion opportunity",
                f"{day}s show 25% lower traffic. A special discount could increase visits by an estimated 30%.",
                "high", 0.79,
            ),
        ]

    if kind == "marketing":
        return [
            _insight(
                "Student happy hour opportunity",
                "Analysis shows most students visit between 4-6pm. "
                "A 10% discount during this window could increase orders by 35%.",
                "high", 0.88,
            ),
            _insight(
                "Loyalty program impact projection",
                "Simulation shows a stamp-card program would increase repeat visits by 22% "
                "with minimal revenue impact.",
                "medium", 0.81,
            ),
            _insight(
                "Social media opportunity",
                "73% of your target demographic is active on Instagram between 7-9pm. "
                "Schedule promotions accordingly.",
                "medium", 0.76,
            ),
        ]

    return []


# =============================================================================
# PER-USER MENU RECOMMENDATIONS
# =============================================================================

def favorite_category(ordered_item_ids: Iterable[int], catalog: Sequence) -> str | None:
    """
    Most frequently ordered category, counting one per ordered line.
    On a tie the category seen first in the history wins.
    """
    category_of = {item.id: item.category for item in catalog}
    counts = Counter(
        category_of[item_id] for item_id in ordered_item_ids if category_of.get(item_id)
    )

    favorite, best = None, 0
    for category, count in counts.items():
        if count > best:
            favorite, best = category, count
    return favorite


def recommend_for_user(ordered_item_ids: Sequence[int], catalog: Sequence) -> tuple[list, str | None]:
    """
    Pick up to three items the user has never ordered:
    first from their favourite category, then padded with globally
    popular items. Fewer than three are returned when the catalog runs out.

    catalog items need id, category and is_popular; order is preserved.
    """
    seen = set(ordered_item_ids)
    favorite = favorite_category(ordered_item_ids, catalog)

    picks = [
        item for item in catalog
        if favorite is not None and item.category == favorite and item.id not in seen
    ][:RECOMMENDATION_LIMIT]

    if len(picks) < RECOMMENDATION_LIMIT:
        chosen = {item.id for item in picks}
        popular = [
            item for item in catalog
            if item.is_popular and item.id not in seen and item.id not in chosen
        ]
        picks.extend(popular[:RECOMMENDATION_LIMIT - len(picks)])

    return picks, favorite


# =============================================================================
# INVENTORY HINTS
# =============================================================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def consumption_rates(
    inventory: Sequence,
    recent_order_lines: Iterable[tuple[int, int]],
    ingredients_by_item: Mapping[int, Sequence[str]],
) -> list[dict]:
    """
    Estimate daily usage of each inventory item from a week of order lines.

    recent_order_lines: (menu_item_id, quantity) pairs
    ingredients_by_item: menu_item_id -> ingredient names (matched to InventoryItem.name)
    """
    usage: Counter = Counter()
    for menu_item_id, quantity in recent_order_lines:
        for ingredient in ingredients_by_item.get(menu_item_id) or ():
            usage[ingredient] += quantity

    rates = []
    for item in inventory:
        weekly = usage.get(item.name, 0)
        daily = weekly / CONSUMPTION_WINDOW_DAYS
        days_left = _round_half_up(item.quantity / daily) if weekly > 0 else UNUSED_DAYS_SENTINEL

        if days_left < REORDER_HORIZON_DAYS:
            advice = f"Based on current usage, {item.name} will need reordering in approximately {days_left} days."
        else:
            advice = f"Sufficient {item.name} stock for current demand."

        rates.append({
            "id": item.id,
            "name": item.name,
            "estimatedDailyUsage": daily,
            "daysUntilReorder": days_left,
            "recommendation": advice,
        })
    return rates


def low_stock_alerts(inventory: Sequence) -> list[dict]:
    alerts = []
    for item in inventory:
        if item.quantity > item.threshold * LOW_STOCK_MARGIN:
            continue
        alerts.append({
            "id": item.id,
            "name": item.name,
            "currentQuantity": item.quantity,
            "threshold": item.threshold,
            "unit": item.unit,
            "urgency": "critical" if item.quantity <= item.threshold else "warning",
            "recommendation": (
                f"Restock {item.name} soon. Current level: {item.quantity:g} {item.unit} "
                f"(threshold: {item.threshold:g} {item.unit})"
            ),
        })
    return alerts


def waste_reduction(inventory: Sequence, rates: Sequence[dict]) -> list[dict]:
    """Slow-moving items with more than a month of stock."""
    quantity_of = {item.id: item.quantity for item in inventory}
    hints = []
    for rate in rates:
        if rate["estimatedDailyUsage"] >= WASTE_MAX_DAILY_USAGE or rate["daysUntilReorder"] <= WASTE_MIN_DAYS_OF_STOCK:
            continue
        hints.append({
            "id": rate["id"],
            "name": rate["name"],
            "currentStock": quantity_of.get(rate["id"], 0),
            "estimatedDailyUsage": rate["estimatedDailyUsage"],
            "recommendation": (
                f"Consider reducing order quantity for {rate['name']}. "
                f"Current stock will last {rate['daysUntilReorder']} days at current usage."
            ),
        })
    return hints


def inventory_recommendations(
    inventory: Sequence,
    recent_order_lines: Iterable[tuple[int, int]],
    ingredients_by_item: Mapping[int, Sequence[str]],
) -> dict:
    rates = consumption_rates(inventory, recent_order_lines, ingredients_by_item)
    return {
        "lowStockAlerts": low_stock_alerts(inventory),
        "consumptionAnalysis": rates,
        "wasteReduction": waste_reduction(inventory, rates),
    }
