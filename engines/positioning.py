"""
Retention Calculator: Market Positioning Engine
Compa-ratio, range position and market-position label of a base salary against
a compensation range, plus the percentage and tenure helpers every other engine
shares.
"""
import logging
from datetime import date, datetime

logger = logging.getLogger(__name__)

# (upper bound exclusive, label), checked in order
MARKET_POSITIONS = [
    (80, 'Below Market'),
    (90, 'Below Mid-Market'),
    (110, 'Market Competitive'),
    (120, 'Above Market'),
]
PREMIUM_POSITION = 'Premium Market'
UNKNOWN_POSITION = 'Unknown'

# Distribution buckets used by the positioning chart; upper bounds inclusive at 110/120
COMPA_BANDS = [
    ('below_80', 'Below 80%'),
    ('80_90', '80-90%'),
    ('90_110', '90-110%'),
    ('110_120', '110-120%'),
    ('above_120', 'Above 120%'),
]


def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def market_position_label(compa_ratio):
    for upper, label in MARKET_POSITIONS:
        if compa_ratio < upper:
            return label
    return PREMIUM_POSITION


def calculate_positioning(salary, rng):
    """Position a base salary inside a compensation range.

    Returns compaRatio (salary / midpoint, percent), rangePosition (0 at the
    band minimum, 100 at the maximum, clamped) and the market-position label.
    Without a range every metric is zero and the label is 'Unknown'.
    """
    if not rng:
        return {'compaRatio': 0, 'rangePosition': 0, 'marketPosition': UNKNOWN_POSITION}

    mid = rng['midSalary']
    compa_ratio = salary / mid * 100 if mid else 0

    width = rng['maxSalary'] - rng['minSalary']
    if width > 0:
        range_position = (salary - rng['minSalary']) / width * 100
    else:
        range_position = 100 if salary >= rng['maxSalary'] else 0

    return {
        'compaRatio': compa_ratio,
        'rangePosition': clamp(range_position, 0, 100),
        'marketPosition': market_position_label(compa_ratio),
    }


def compa_band(compa_ratio):
    if compa_ratio < 80: return 'below_80'
    if compa_ratio < 90: return '80_90'
    if compa_ratio <= 110: return '90_110'
    if compa_ratio <= 120: return '110_120'
    return 'above_120'


def percent_increase(current, proposed):
    """Growth of proposed over current in percent; 0 when there is no baseline."""
    if not current:
        return 0.0
    return (proposed - current) / current * 100


def tenure_years(hire_date, today=None):
    """Calendar-year tenure: current year minus hire year.

    A missing or unparseable hire date counts as 0 years so tenure rules do not fire.
    """
    today = today or date.today()
    if isinstance(hire_date, (datetime, date)):
        hire_year = hire_date.year
    else:
        try:
            hire_year = datetime.strptime(str(hire_date or '')[:10], '%Y-%m-%d').year
        except ValueError:
            logger.warning("Unreadable hire date %r, tenure taken as 0", hire_date)
            return 0
    return today.year - hire_year


def round_money(v):
    """Round half away from zero to whole currency units."""
    return int(v + 0.5) if v >= 0 else -int(-v + 0.5)
