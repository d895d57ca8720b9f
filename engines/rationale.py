"""
Retention Calculator: Rationale Engine
Candidate business justifications for a counter proposal. Each rule fires
independently; the order of RATIONALES is the order suggestions are offered.
"""
from engines.positioning import calculate_positioning, percent_increase, tenure_years

RATIONALES = {
    'below_market': 'Employee is currently below market midpoint, adjustment needed to align with market standards',
    'tenure': 'Recognizing {years} years of dedicated service and institutional knowledge',
    'market_pressure': 'Significant market pressure requires competitive response to retain critical talent',
    'critical_skills': 'Critical technical skills in high demand, retention essential for product delivery',
    'promotion': 'Promotion to next level justified by expanded responsibilities and market benchmarking',
    'retention_cost': 'Retention investment significantly lower than replacement costs and knowledge transfer risks',
    'senior_contributor': 'Senior contributor with mentoring responsibilities, loss would impact team productivity',
}

CRITICAL_DEPARTMENTS = ('Engineering',)
SENIOR_LEVELS = ('4', '5')


def generate_rationale_suggestions(employee, current_range, offer, strategy,
                                   promotion_range=None, today=None):
    strategy = getattr(strategy, 'value', strategy)
    years = tenure_years(employee['hireDate'], today)
    current = calculate_positioning(employee['currentSalary'], current_range)
    offer_increase = percent_increase(employee['ctc'], offer.get('ctc', 0))

    suggestions = []
    if current['compaRatio'] < 90:
        suggestions.append(RATIONALES['below_market'])
    if years >= 3:
        suggestions.append(RATIONALES['tenure'].format(years=years))
    if offer_increase > 30:
        suggestions.append(RATIONALES['market_pressure'])
    if employee.get('department') in CRITICAL_DEPARTMENTS:
        suggestions.append(RATIONALES['critical_skills'])
    if promotion_range and strategy == 'aggressive':
        suggestions.append(RATIONALES['promotion'])
    suggestions.append(RATIONALES['retention_cost'])
    if str(employee.get('level', '')) in SENIOR_LEVELS:
        suggestions.append(RATIONALES['senior_contributor'])
    return suggestions


def compose_rationale(lead, suggestions, limit=2):
    """Lead sentence followed by the first `limit` suggestions, one paragraph."""
    return f"{lead}. {'. '.join(suggestions[:limit])}."
