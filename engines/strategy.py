"""
Retention Calculator: Proposal Strategy Engine
Builds the recommended counter proposal for the conservative, competitive and
aggressive strategies. Custom proposals are edited by hand (custom_proposal.py).
"""
import logging
from enum import Enum

from engines.positioning import (calculate_positioning, clamp, percent_increase,
                                 round_money, tenure_years, UNKNOWN_POSITION)
from engines.rationale import generate_rationale_suggestions, compose_rationale

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    CONSERVATIVE = 'conservative'
    COMPETITIVE = 'competitive'
    AGGRESSIVE = 'aggressive'
    CUSTOM = 'custom'


STRATEGY_INFO = {
    Strategy.CONSERVATIVE: {'label': 'Conservative', 'desc': 'Budget-friendly, 75-85% match', 'risk': 'Higher retention risk'},
    Strategy.COMPETITIVE: {'label': 'Competitive', 'desc': 'Market-aligned, 85-95% match', 'risk': 'Balanced approach'},
    Strategy.AGGRESSIVE: {'label': 'Aggressive', 'desc': 'Exceed offer, secure talent', 'risk': 'Higher cost investment'},
    Strategy.CUSTOM: {'label': 'Custom', 'desc': 'Manual adjustments', 'risk': 'Full control'},
}

# multiplier on the offer increase, cap on the raise (%), ceiling as a multiple of range max
CONSERVATIVE = {'share': 0.8, 'cap': 15, 'rangeCeiling': 0.95, 'confidence': 65}
COMPETITIVE = {'share': 0.9, 'cap': 25, 'rangeCeiling': 1.1, 'confidence': 85}
AGGRESSIVE = {'promotionOfferMult': 1.05, 'offerMult': 1.02, 'rangeCeiling': 1.2,
              'variableBump': 2, 'confidence': 90}

CONFIDENCE_ADJUSTMENTS = {
    'marketCompetitive': 10,   # proposed compa-ratio within [90, 110]
    'longTenure': 5,           # more than 3 years of service
    'criticalDepartment': 5,   # Engineering
    'heavyMarketPressure': -10,  # offer more than 40% above current CTC
}


def empty_proposal():
    """Placeholder record for a dashboard that has nothing to propose yet."""
    return {
        'basePay': 0, 'variablePay': 0, 'variablePercentage': 0, 'ctc': 0,
        'rationale': '', 'riskLevel': 'medium', 'confidence': 0,
        'compaRatio': 0, 'rangePosition': 0, 'marketPosition': UNKNOWN_POSITION,
    }


def is_empty(proposal):
    return not proposal or proposal.get('ctc', 0) == 0


def generate_proposal(employee, current_range, promotion_range, offer, strategy,
                      today=None, rationale_limit=2):
    """Counter proposal for a computed strategy.

    Returns None until there is an employee, a current range and a competing
    offer with a positive CTC.
    """
    strategy = Strategy(strategy)
    if strategy is Strategy.CUSTOM:
        raise ValueError("custom proposals are built with apply_custom_edit, not generated")
    if not employee or not current_range or not offer or offer.get('ctc', 0) <= 0:
        return None

    offer_increase = percent_increase(employee['ctc'], offer['ctc'])
    years = tenure_years(employee['hireDate'], today)

    if strategy is Strategy.CONSERVATIVE:
        increase = min(offer_increase * CONSERVATIVE['share'], CONSERVATIVE['cap'])
        base_pay = min(employee['currentSalary'] * (1 + increase / 100),
                       current_range['maxSalary'] * CONSERVATIVE['rangeCeiling'])
        variable_pct = min(current_range['variablePercentage'], employee['variablePercentage'] + 1)
        risk = 'high'
        confidence = CONSERVATIVE['confidence']
        lead = f"Conservative {increase:.1f}% increase maintaining budget discipline while addressing market pressure"
    elif strategy is Strategy.COMPETITIVE:
        increase = min(offer_increase * COMPETITIVE['share'], COMPETITIVE['cap'])
        base_pay = min(employee['currentSalary'] * (1 + increase / 100),
                       current_range['maxSalary'] * COMPETITIVE['rangeCeiling'])
        variable_pct = current_range['variablePercentage']
        risk = 'medium'
        confidence = COMPETITIVE['confidence']
        lead = f"Market-competitive {increase:.1f}% increase balancing retention risk with cost management"
    else:
        if promotion_range:
            base_pay = min(promotion_range['midSalary'], offer['basePay'] * AGGRESSIVE['promotionOfferMult'])
        else:
            base_pay = min(current_range['maxSalary'] * AGGRESSIVE['rangeCeiling'],
                           offer['basePay'] * AGGRESSIVE['offerMult'])
        if promotion_range and promotion_range.get('variablePercentage'):
            variable_pct = promotion_range['variablePercentage']
        else:
            variable_pct = current_range['variablePercentage'] + AGGRESSIVE['variableBump']
        risk = 'low'
        confidence = AGGRESSIVE['confidence']
        lead = "Aggressive retention strategy matching external market to secure critical talent"

    base_pay = round_money(base_pay)
    variable_pay = round_money(base_pay * variable_pct / 100)
    positioning = calculate_positioning(base_pay, current_range)

    if 90 <= positioning['compaRatio'] <= 110:
        confidence += CONFIDENCE_ADJUSTMENTS['marketCompetitive']
    if years > 3:
        confidence += CONFIDENCE_ADJUSTMENTS['longTenure']
    if employee.get('department') == 'Engineering':
        confidence += CONFIDENCE_ADJUSTMENTS['criticalDepartment']
    if offer_increase > 40:
        confidence += CONFIDENCE_ADJUSTMENTS['heavyMarketPressure']

    suggestions = generate_rationale_suggestions(employee, current_range, offer, strategy.value,
                                                 promotion_range, today)
    logger.debug("%s proposal for %s: base=%s compa=%.1f", strategy.value,
                 employee.get('name'), base_pay, positioning['compaRatio'])

    return {
        'basePay': base_pay,
        'variablePay': variable_pay,
        'variablePercentage': variable_pct,
        'ctc': base_pay + variable_pay,
        'rationale': compose_rationale(lead, suggestions, rationale_limit),
        'riskLevel': risk,
        'confidence': clamp(confidence, 0, 100),
        'compaRatio': positioning['compaRatio'],
        'rangePosition': positioning['rangePosition'],
        'marketPosition': positioning['marketPosition'],
    }
