"""
Retention Calculator: Custom Proposal Editor
Manual counter proposal. Base pay, variable % and variable pay stay linked:
editing one re-derives the other so CTC always equals base plus variable pay.
"""
from engines.positioning import calculate_positioning, percent_increase

EDITABLE_FIELDS = ('basePay', 'variablePercentage', 'variablePay')
CUSTOM_CONFIDENCE = 70

# (CTC increase upper bound exclusive, risk); anything above is low risk
RISK_BY_INCREASE = [(10, 'high'), (20, 'medium')]


def risk_for_increase(increase_pct):
    for upper, risk in RISK_BY_INCREASE:
        if increase_pct < upper:
            return risk
    return 'low'


def _rederive(proposal, employee, current_range, rationale):
    proposal['ctc'] = proposal['basePay'] + proposal['variablePay']
    proposal.update(calculate_positioning(proposal['basePay'], current_range))
    increase = percent_increase(employee['ctc'], proposal['ctc'])
    proposal['riskLevel'] = risk_for_increase(increase)
    proposal['rationale'] = (rationale or '').strip() or \
        f"Custom proposal with {increase:.1f}% increase over current compensation"
    return proposal


def seed_custom_proposal(employee, current_range, rationale=None):
    """Starting point for manual edits: the employee's current package."""
    proposal = {
        'basePay': employee['currentSalary'],
        'variablePay': employee['variablePay'],
        'variablePercentage': employee['variablePercentage'],
        'confidence': CUSTOM_CONFIDENCE,
    }
    return _rederive(proposal, employee, current_range, rationale)


def apply_custom_edit(proposal, field, value, employee, current_range, rationale=None):
    """Return a copy of proposal with one linked field changed."""
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"{field!r} is not editable; expected one of {', '.join(EDITABLE_FIELDS)}")
    updated = dict(proposal) if proposal else seed_custom_proposal(employee, current_range, rationale)
    value = float(value or 0)

    if field == 'basePay':
        updated['basePay'] = value
        updated['variablePay'] = value * updated['variablePercentage'] / 100
    elif field == 'variablePercentage':
        updated['variablePercentage'] = value
        updated['variablePay'] = updated['basePay'] * value / 100
    else:
        updated['variablePay'] = value
        updated['variablePercentage'] = value / updated['basePay'] * 100 if updated['basePay'] > 0 else 0

    return _rederive(updated, employee, current_range, rationale)


def refresh_custom_proposal(proposal, employee, current_range, rationale=None):
    """Re-derive positioning, risk and rationale without touching the pay fields."""
    return _rederive(dict(proposal), employee, current_range, rationale)
