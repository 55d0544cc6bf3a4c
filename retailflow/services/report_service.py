"""Report service - net sales totals per day, month and year."""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import List, Dict, Any

from sqlalchemy import func

from retailflow.exceptions import ValidationError
from retailflow.models import SalesInvoice

logger = logging.getLogger(__name__)

GRANULARITIES = ('date', 'month', 'year')


def _period_key(day, granularity):
    if granularity == 'month':
        return day.strftime('%Y-%m')
    if granularity == 'year':
        return day.year
    return day.isoformat()


def _load_sales_totals(session, granularity: str) -> List[Dict[str, Any]]:
    # Daily sums are portable across dialects; coarser periods are rolled up here
    rows = (session.query(SalesInvoice.post_date, func.sum(SalesInvoice.net_total))
            .group_by(SalesInvoice.post_date)
            .order_by(SalesInvoice.post_date)
            .all())

    totals = OrderedDict()
    for day, total in rows:
        key = _period_key(day, granularity)
        totals[key] = totals.get(key, Decimal('0.00')) + Decimal(str(total or 0))

    return [
        {granularity: period, 'total_net': float(amount.quantize(Decimal('0.01')))}
        for period, amount in totals.items()
    ]


def get_sales_totals(session, granularity: str) -> List[Dict[str, Any]]:
    """
    Net sales grouped by period.

    Args:
        session: SQLAlchemy session
        granularity: 'date', 'month' or 'year'

    Returns:
        List of {<granularity>: period, 'total_net': float} ordered by period
    """
    if granularity not in GRANULARITIES:
        raise ValidationError(f'Unknown report period: {granularity}')

    try:
        from flask import current_app
        from retailflow.services.cache_service import get_cache

        cache = get_cache()
        ttl = current_app.config.get('CACHE_REPORTS_TTL', 300)
        return cache.memoize('reports', f'sales:{granularity}',
                             lambda: _load_sales_totals(session, granularity), ttl)
    except RuntimeError:
        logger.debug("[CACHE] Cache not initialized, querying reports directly")
        return _load_sales_totals(session, granularity)
