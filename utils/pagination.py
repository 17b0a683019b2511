import math

from utils.errors import ValidationError

MAX_LIMIT = 100
MAX_PAGE = 10 ** 9


def _positive_int(value, name, default):
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a positive integer", fields=[name])
    if number < 1:
        raise ValidationError(f"'{name}' must be a positive integer", fields=[name])
    return number


def _page(value):
    page = _positive_int(value, 'page', 1)
    if page > MAX_PAGE:
        raise ValidationError(f"'page' must not exceed {MAX_PAGE}", fields=['page'])
    return page


def parse_pagination(args, default_limit):
    page = _page(args.get('page'))
    limit = min(_positive_int(args.get('limit'), 'limit', default_limit), MAX_LIMIT)
    return page, limit


def paginate(query, page, limit):
    """Apply 1-indexed page/limit to ``query``; returns (items, pagination dict)."""
    count = query.order_by(None).count()
    items = query.limit(limit).offset((page - 1) * limit).all()
    return items, {
        'current': page,
        'total': math.ceil(count / limit),
        'count': count,
    }
