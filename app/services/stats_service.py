import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from app.core.config import STATS_FALLBACK_HOURS, STATS_TIMEZONE, STATS_TOP_ITEMS
from app.core.money import round_amount
from app.models.menu import MenuItem
from app.models.order import Order, OrderStatus

log = logging.getLogger(__name__)

NO_CATEGORY = "N/A"


def _midnight(day: date, tz: Optional[tzinfo]) -> datetime:
    if tz is None:
        # Naive local midnight resolved through the system zone and its DST rules
        return datetime(day.year, day.month, day.day).astimezone()
    return datetime(day.year, day.month, day.day, tzinfo=tz)


def local_day_bounds(now: datetime, tz: Optional[tzinfo] = None):
    """
    Midnight opening `now`'s calendar day in `tz` (the system zone when None)
    and the midnight closing it. Both bounds are built from the date, so on a
    DST change day they carry different offsets and the day is 23 or 25 hours.
    """
    day = now.astimezone(tz).date()
    return _midnight(day, tz), _midnight(day + timedelta(days=1), tz)


def select_reporting_orders(
    orders: Sequence[Order],
    now: datetime,
    fallback_hours: int = STATS_FALLBACK_HOURS,
    tz: Optional[tzinfo] = None,
) -> List[Order]:
    """
    Completed orders placed today (local calendar day). When there are none,
    falls back to the trailing `fallback_hours` so a quiet morning does not
    show an empty dashboard.
    """
    start, end = local_day_bounds(now, tz)
    today = [o for o in orders if start <= o.created_at < end]
    if today:
        return today
    since = now - timedelta(hours=fallback_hours)
    return [o for o in orders if o.created_at >= since]


def count_items(orders: Iterable[Order]) -> Dict[str, int]:
    """Aggregate quantity per item name, in first-seen order."""
    counts: Dict[str, int] = {}
    for order in orders:
        for line in order.items or []:
            name = line.get("name")
            if not name:
                log.warning(f"Order {order.id} has a line item without a name, skipping it.")
                continue
            counts[name] = counts.get(name, 0) + (line.get("quantity") or 1)
    return counts


def top_items(counts: Dict[str, int], limit: int = STATS_TOP_ITEMS) -> List[Dict]:
    # sorted() is stable: equal quantities keep first-seen order
    ranked = sorted(counts.items(), key=lambda entry: entry[1], reverse=True)
    return [{"name": name, "quantity": quantity} for name, quantity in ranked[:limit]]


def favorite_category(counts: Dict[str, int], name_to_category: Dict[str, str]) -> str:
    category_counts: Dict[str, int] = {}
    for name, quantity in counts.items():
        category = name_to_category.get(name)
        if category:
            category_counts[category] = category_counts.get(category, 0) + quantity
    if not category_counts:
        return NO_CATEGORY
    # max() returns the first of equal maxima, i.e. the first category seen
    return max(category_counts.items(), key=lambda entry: entry[1])[0]


def total_revenue(orders: Iterable[Order]) -> Decimal:
    return round_amount(sum((Decimal(str(o.total_amount or 0)) for o in orders), Decimal("0")))


async def compute_dashboard_stats(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> Dict:
    """
    Revenue, best sellers and favourite category over completed orders.
    Read-only; everything is queried fresh on each call.
    """
    if tz is None and STATS_TIMEZONE:
        tz = ZoneInfo(STATS_TIMEZONE)
    now = now or datetime.now(timezone.utc)
    start, _ = local_day_bounds(now, tz)
    since = min(start, now - timedelta(hours=STATS_FALLBACK_HOURS)).astimezone(timezone.utc)

    # Oldest first, so ties in the rankings go to what was ordered first
    candidates = await Order.filter(status=OrderStatus.PICKED_UP, created_at__gte=since).order_by("created_at")
    orders = select_reporting_orders(candidates, now, tz=tz)
    log.info(f"Dashboard stats over {len(orders)} completed orders.")

    counts = count_items(orders)
    name_to_category = {}
    if counts:
        menu_items = await MenuItem.filter(name__in=list(counts)).values("name", "category")
        name_to_category = {row["name"]: getattr(row["category"], "value", row["category"]) for row in menu_items}

    return {
        "topItems": top_items(counts),
        "favoriteCategory": favorite_category(counts, name_to_category),
        "todayRevenue": float(total_revenue(orders)),
    }
