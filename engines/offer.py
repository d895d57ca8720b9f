"""
Retention Calculator: Competing Offer Builder
Turns the offer form (base pay, CTC, variable %) into a complete offer record.
Either CTC or base pay with a variable % is enough; the rest is derived.
"""


def _num(val):
    if val is None or val == '':
        return 0.0
    try:
        return float(val)
    except (TypeError, ValueError):
        return 0.0


def build_competing_offer(base_pay=0, ctc=0, variable_percentage=0):
    base = _num(base_pay)
    total = _num(ctc)
    var_pct = _num(variable_percentage)

    variable_pay = 0.0
    if var_pct > 0 and base > 0:
        variable_pay = base * var_pct / 100
    elif total > 0 and base > 0:
        variable_pay = total - base

    return {
        'basePay': base,
        'variablePay': variable_pay,
        'ctc': total or (base + variable_pay),
    }


def offer_variable_percentage(offer):
    if offer.get('basePay', 0) > 0:
        return offer['variablePay'] / offer['basePay'] * 100
    return 0.0


def has_offer(offer):
    return bool(offer) and (offer.get('ctc', 0) > 0 or offer.get('basePay', 0) > 0)
