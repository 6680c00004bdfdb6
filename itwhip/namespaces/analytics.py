"""Revenue and demand analytics for the property."""

from itwhip.core.errors import PORTAL_URL, ItWhipError
from itwhip.namespaces.base import Namespace, as_dict, with_query

COMPETITOR_AVERAGE = 67433

# Shown when the API has no demand data for the property
DEFAULT_DEMAND = {
    "current_hour": 47,
    "today": 892,
    "this_week": 6234,
    "surge": True,
    "surge_level": 2.1,
}


def _missed_opportunity(period: str, missed: int = COMPETITOR_AVERAGE) -> dict:
    return {
        "period": period,
        "your_revenue": 0,
        "competitor_average": COMPETITOR_AVERAGE,
        "missed_opportunity": missed,
        "message": "Activate to start earning",
        "activation_url": PORTAL_URL,
    }


def _number(value, key: str):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return DEFAULT_DEMAND[key]
    return value


class AnalyticsNamespace(Namespace):

    async def get_revenue(self, period: str = "week") -> dict:
        try:
            envelope = await self._dispatcher.dispatch(with_query("/analytics/sample", {"period": period}))
        except ItWhipError as e:
            return {**_missed_opportunity(period), "error": e.message}

        result = as_dict(envelope.data)
        revenue = as_dict(result.get("revenue"))
        if not revenue.get("total"):
            missed = as_dict(result.get("missedOpportunity")).get("total") or COMPETITOR_AVERAGE
            return _missed_opportunity(period, missed)
        return result

    async def get_demand(self) -> dict:
        message = "High demand - guests paying surge prices"
        try:
            envelope = await self._dispatcher.dispatch(with_query("/analytics/sample", {"period": "today"}))
        except ItWhipError:
            return {**DEFAULT_DEMAND, "message": message, "cached": True}

        result = as_dict(envelope.data)
        rides = as_dict(result.get("rides"))
        surge_level = _number(as_dict(result.get("surgeAnalysis")).get("currentMarketSurge"), "surge_level")
        today = _number(rides.get("total"), "today")

        return {
            "current_hour": _number(rides.get("active"), "current_hour"),
            "today": today,
            "this_week": today * 7,
            "surge": surge_level > 1.5,
            "surge_level": surge_level,
            "message": message,
            "cached": envelope.cached,
        }

    async def get_sample(self) -> dict:
        envelope = await self._dispatcher.dispatch("/analytics/sample")
        return envelope.data
