"""
Retention Calculator: Comparison Engine
Side-by-side view of the current package, the competing offer, the counter
proposal and the promotion package, plus the series behind the dashboard charts.
All figures are raw numbers; formatting belongs to the front end.
"""
from engines.offer import offer_variable_percentage
from engines.positioning import (calculate_positioning, compa_band, percent_increase,
                                 tenure_years, COMPA_BANDS)

LAKH = 100000
RISK_SCORE = {'high': 80, 'medium': 50, 'low': 20}


def build_promotion_proposal(promotion_range):
    """Package at the midpoint of the promotion range."""
    if not promotion_range:
        return None
    base = promotion_range['midSalary']
    variable = base * promotion_range['variablePercentage'] / 100
    return {
        'basePay': base, 'variablePay': variable,
        'variablePercentage': promotion_range['variablePercentage'],
        'ctc': base + variable,
    }


def _package_row(key, label, pkg, employee, rng, exchange_rate):
    pos = calculate_positioning(pkg['basePay'], rng)
    return {
        'key': key, 'label': label,
        'basePay': round(pkg['basePay']), 'variablePay': round(pkg['variablePay']),
        'variablePercentage': round(pkg['variablePercentage'], 1),
        'ctc': round(pkg['ctc']),
        'ctcUsd': round(pkg['ctc'] / exchange_rate, 2) if exchange_rate else 0,
        'ctcIncreasePct': round(percent_increase(employee['ctc'], pkg['ctc']), 2),
        'compaRatio': round(pos['compaRatio'], 1),
        'rangePosition': round(pos['rangePosition'], 1),
        'marketPosition': pos['marketPosition'],
    }


def build_packages(employee, offer, proposal, current_range, promotion_range, exchange_rate):
    current = {
        'basePay': employee['currentSalary'], 'variablePay': employee['variablePay'],
        'variablePercentage': employee['variablePercentage'], 'ctc': employee['ctc'],
    }
    competing = dict(offer, variablePercentage=offer_variable_percentage(offer))
    rows = [
        _package_row('current', 'Current', current, employee, current_range, exchange_rate),
        _package_row('competing', 'Competing Offer', competing, employee, current_range, exchange_rate),
    ]
    if proposal:
        rows.append(_package_row('counter', 'Counter Proposal', proposal, employee, current_range, exchange_rate))
    promo = build_promotion_proposal(promotion_range)
    if promo:
        # promotion package is positioned against its own band
        rows.append(_package_row('promotion', 'Promotion Proposal', promo, employee, promotion_range, exchange_rate))
    return rows


def build_increment_analysis(employee, offer, proposal):
    rows = []
    for label, cur_key, pkg_key in (('Base Pay', 'currentSalary', 'basePay'),
                                    ('Variable Pay', 'variablePay', 'variablePay'),
                                    ('Total CTC', 'ctc', 'ctc')):
        rows.append({
            'category': label, 'current': 0,
            'competing': round(percent_increase(employee[cur_key], offer[pkg_key]), 2),
            'counter': round(percent_increase(employee[cur_key], proposal[pkg_key]), 2) if proposal else 0,
        })
    return rows


def build_range_analysis(current_range, promotion_range):
    rows = []
    for label, key in (('Min', 'minSalary'), ('Mid', 'midSalary'), ('Max', 'maxSalary')):
        rows.append({
            'name': label,
            'current': round(current_range[key] / LAKH, 2) if current_range else 0,
            'promotion': round(promotion_range[key] / LAKH, 2) if promotion_range else 0,
        })
    return rows


def build_positioning_distribution(compa_ratio):
    active = compa_band(compa_ratio)
    return [{'band': key, 'name': label, 'value': 1 if key == active else 0}
            for key, label in COMPA_BANDS]


def build_key_metrics(employee, offer, proposal, today=None):
    return {
        'confidence': proposal['confidence'],
        'costDifference': round(proposal['ctc'] - offer['ctc']),
        'counterIncreasePct': round(percent_increase(employee['ctc'], proposal['ctc']), 2),
        'competingIncreasePct': round(percent_increase(employee['ctc'], offer['ctc']), 2),
        'compaRatio': round(proposal['compaRatio'], 1),
        'yearsOfService': tenure_years(employee['hireDate'], today),
        'riskScore': RISK_SCORE.get(proposal['riskLevel'], 50),
    }


def build_comparison(employee, offer, proposal, current_range, promotion_range,
                     exchange_rate, today=None):
    """Everything the comparison tables and charts render, in one payload."""
    result = {
        'packages': build_packages(employee, offer, proposal, current_range, promotion_range, exchange_rate),
        'incrementAnalysis': build_increment_analysis(employee, offer, proposal),
        'rangeAnalysis': build_range_analysis(current_range, promotion_range),
        'exchangeRate': exchange_rate,
    }
    if proposal:
        result['keyMetrics'] = build_key_metrics(employee, offer, proposal, today)
        result['positioningDistribution'] = build_positioning_distribution(proposal['compaRatio'])
    return result
