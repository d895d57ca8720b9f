"""
Retention Calculator: Flask API Server
Employee compensation analysis and counter proposals for HR teams.
Every mutation endpoint recomputes the dependent proposal state before it
answers, so the dashboard always reads a consistent snapshot.
"""
import logging
import os
from flask import Flask, jsonify, request
from engines.data_loader import run_etl
from engines.directory import (search_employees, find_employee, find_current_range,
                               find_promotion_ranges, find_range)
from engines.offer import build_competing_offer, has_offer
from engines.positioning import calculate_positioning, percent_increase
from engines.rationale import generate_rationale_suggestions
from engines.strategy import Strategy, STRATEGY_INFO, generate_proposal, empty_proposal, is_empty
from engines.custom_proposal import (seed_custom_proposal, apply_custom_edit,
                                     refresh_custom_proposal, EDITABLE_FIELDS)
from engines.comparison import build_comparison

logger = logging.getLogger(__name__)

app = Flask(__name__)

STATE = {
    'data': None, 'employee': None, 'currentRange': None, 'promotionRange': None,
    'offer': build_competing_offer(), 'strategy': Strategy.COMPETITIVE,
    'aiSuggestion': None, 'customProposal': None, 'customRationale': '',
    'proposal': None, 'loaded': False,
}


def _default_strategy(params):
    try:
        return Strategy(params.get('defaultStrategy', 'competitive'))
    except ValueError:
        logger.warning("Unknown default strategy %r, using competitive", params.get('defaultStrategy'))
        return Strategy.COMPETITIVE


def _reset_session():
    """Clear every user selection; datasets stay loaded."""
    params = STATE['data']['params'] if STATE['data'] else {}
    STATE.update({
        'employee': None, 'currentRange': None, 'promotionRange': None,
        'offer': build_competing_offer(), 'strategy': _default_strategy(params),
        'aiSuggestion': None, 'customProposal': None, 'customRationale': '',
        'proposal': empty_proposal(),
    })


def _run_all():
    STATE['data'] = run_etl()
    _reset_session()
    STATE['loaded'] = True
    return True


def _recompute():
    """Recompute AI suggestion and active proposal from the current selections."""
    params = STATE['data']['params']
    emp = STATE['employee']; cur = STATE['currentRange']
    promo = STATE['promotionRange']; offer = STATE['offer']
    strategy = STATE['strategy']

    # Custom mode shows the competitive recommendation as insight, not a current-salary fallback
    insight_strategy = Strategy.COMPETITIVE if strategy is Strategy.CUSTOM else strategy
    STATE['aiSuggestion'] = generate_proposal(emp, cur, promo, offer, insight_strategy,
                                              rationale_limit=params.get('rationaleLimit', 2))

    if strategy is Strategy.CUSTOM and emp:
        if STATE['customProposal'] is None:
            STATE['customProposal'] = seed_custom_proposal(emp, cur, STATE['customRationale'])
        else:
            STATE['customProposal'] = refresh_custom_proposal(STATE['customProposal'], emp, cur,
                                                              STATE['customRationale'])
        STATE['proposal'] = STATE['customProposal']
    elif strategy is Strategy.CUSTOM:
        STATE['proposal'] = empty_proposal()
    else:
        STATE['proposal'] = STATE['aiSuggestion'] or empty_proposal()


@app.before_request
def _ensure_loaded():
    if not STATE['loaded'] and not STATE.get('_load_error'):
        try:
            _run_all()
            logger.info("Retention calculator data loaded")
        except Exception as e:
            STATE['_load_error'] = f"{type(e).__name__}: {e}"
            logger.exception("Data load failed, API will answer 503 until /api/refresh succeeds")


def _not_loaded():
    return jsonify({'error': 'Data not loaded',
                    'reason': STATE.get('_load_error') or 'Unknown, check server log'}), 503


def _json_body():
    """Posted JSON object, or None when the body is not an object."""
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else None


def _bad_body():
    return jsonify({'error': 'request body must be a JSON object'}), 400


def _strategies():
    return [dict(STRATEGY_INFO[s], key=s.value) for s in Strategy]


def _build_dashboard_object():
    """Snapshot of the session the front end renders."""
    emp = STATE['employee']; cur = STATE['currentRange']; offer = STATE['offer']
    proposal = STATE['proposal'] or empty_proposal()
    data = STATE['data']
    return {
        'employee': emp,
        'currentRange': cur,
        'promotionRange': STATE['promotionRange'],
        'promotionOptions': find_promotion_ranges(cur, data['ranges']),
        'offer': offer,
        'hasOffer': has_offer(offer),
        'strategy': STATE['strategy'].value,
        'strategies': _strategies(),
        'proposal': proposal,
        'hasProposal': not is_empty(proposal),
        'aiInsight': STATE['aiSuggestion'],
        'customRationale': STATE['customRationale'],
        'currentPositioning': calculate_positioning(emp['currentSalary'], cur) if emp else None,
        'competingPositioning': calculate_positioning(offer['basePay'], cur) if emp else None,
        'increaseOverCurrent': round(percent_increase(emp['ctc'], proposal['ctc']), 2)
                               if emp and not is_empty(proposal) else 0,
        'currency': data['params'].get('currency', 'INR'),
        'exchangeRate': data['params'].get('exchangeRate'),
    }


# ══════════════════════════════════════════════════════════════
#  ROUTES
# ══════════════════════════════════════════════════════════════

@app.route('/api/data')
def api_data():
    if not STATE['loaded']: return _not_loaded()
    data = STATE['data']
    return jsonify({
        'employeeCount': data['employeeCount'], 'rangeCount': data['rangeCount'],
        'params': data['params'], 'strategies': _strategies(),
    })


@app.route('/api/dashboard')
def api_dashboard():
    if not STATE['loaded']: return _not_loaded()
    return jsonify(_build_dashboard_object())


@app.route('/api/employees')
def api_employees():
    if not STATE['loaded']: return _not_loaded()
    term = request.args.get('q', '')
    matches = search_employees(STATE['data']['employees'], term)
    return jsonify({'query': term, 'employees': matches, 'count': len(matches)})


@app.route('/api/employee/select', methods=['POST'])
def api_select_employee():
    """Select an employee: auto-match the current range and start a fresh analysis."""
    if not STATE['loaded']: return _not_loaded()
    body = _json_body()
    if body is None: return _bad_body()
    emp_id = body.get('id')
    if emp_id is None:
        return jsonify({'error': 'id required'}), 400
    emp = find_employee(STATE['data']['employees'], emp_id)
    if not emp:
        return jsonify({'error': f'Employee {emp_id} not found'}), 404

    STATE['employee'] = emp
    STATE['currentRange'] = find_current_range(emp, STATE['data']['ranges'])
    STATE['promotionRange'] = None
    STATE['customProposal'] = None
    STATE['customRationale'] = ''
    if not STATE['currentRange']:
        logger.info("No compensation range matches %s (%s, level %s)",
                    emp['name'], emp['jobTitle'], emp['level'])
    _recompute()
    return jsonify({'status': 'ok', 'data': _build_dashboard_object()})


@app.route('/api/ranges')
def api_ranges():
    if not STATE['loaded']: return _not_loaded()
    cur = STATE['currentRange']
    return jsonify({
        'currentRange': cur,
        'promotionRange': STATE['promotionRange'],
        'promotionOptions': find_promotion_ranges(cur, STATE['data']['ranges']),
        'currentCompaRatio': round(calculate_positioning(STATE['employee']['currentSalary'], cur)['compaRatio'], 1)
                             if STATE['employee'] and cur else None,
    })


@app.route('/api/range/promotion', methods=['POST'])
def api_select_promotion():
    """Choose a promotion range from the next-level options, or clear it with null."""
    if not STATE['loaded']: return _not_loaded()
    if not STATE['currentRange']:
        return jsonify({'error': 'Select an employee with a matching range first'}), 400
    body = _json_body()
    if body is None: return _bad_body()
    title = body.get('jobTitle')
    if title is None:
        STATE['promotionRange'] = None
    else:
        options = find_promotion_ranges(STATE['currentRange'], STATE['data']['ranges'])
        rng = find_range(options, title, body.get('level'))
        if not rng:
            return jsonify({'error': f'{title} is not a promotion option'}), 400
        STATE['promotionRange'] = rng
    _recompute()
    return jsonify({'status': 'ok', 'data': _build_dashboard_object()})


@app.route('/api/offer', methods=['POST'])
def api_offer():
    if not STATE['loaded']: return _not_loaded()
    body = _json_body()
    if body is None: return _bad_body()
    STATE['offer'] = build_competing_offer(body.get('basePay'), body.get('ctc'),
                                           body.get('variablePercentage'))
    _recompute()
    return jsonify({'status': 'ok', 'offer': STATE['offer'], 'data': _build_dashboard_object()})


@app.route('/api/strategy', methods=['POST'])
def api_strategy():
    if not STATE['loaded']: return _not_loaded()
    body = _json_body()
    if body is None: return _bad_body()
    try:
        STATE['strategy'] = Strategy(body.get('strategy'))
    except ValueError:
        return jsonify({'error': f"strategy must be one of {', '.join(s.value for s in Strategy)}"}), 400
    _recompute()
    return jsonify({'status': 'ok', 'data': _build_dashboard_object()})


@app.route('/api/custom', methods=['POST'])
def api_custom_edit():
    """Edit one linked field of the custom proposal; switches the session to custom mode."""
    if not STATE['loaded']: return _not_loaded()
    emp = STATE['employee']
    if not emp:
        return jsonify({'error': 'Select an employee first'}), 400
    body = _json_body()
    if body is None: return _bad_body()
    field = body.get('field'); value = body.get('value')
    if field not in EDITABLE_FIELDS:
        return jsonify({'error': f"field must be one of {', '.join(EDITABLE_FIELDS)}"}), 400
    try:
        value = float(value or 0)
    except (TypeError, ValueError):
        return jsonify({'error': 'value must be numeric'}), 400

    STATE['strategy'] = Strategy.CUSTOM
    STATE['customProposal'] = apply_custom_edit(STATE['customProposal'], field, value, emp,
                                                STATE['currentRange'], STATE['customRationale'])
    _recompute()
    return jsonify({'status': 'ok', 'proposal': STATE['proposal'], 'data': _build_dashboard_object()})


@app.route('/api/custom/rationale', methods=['POST'])
def api_custom_rationale():
    if not STATE['loaded']: return _not_loaded()
    body = _json_body()
    if body is None: return _bad_body()
    STATE['customRationale'] = str(body.get('rationale') or '')
    _recompute()
    return jsonify({'status': 'ok', 'data': _build_dashboard_object()})


@app.route('/api/rationale/suggestions')
def api_rationale_suggestions():
    if not STATE['loaded']: return _not_loaded()
    emp = STATE['employee']
    if not emp:
        return jsonify({'error': 'Select an employee first'}), 400
    limit = STATE['data']['params'].get('suggestionLimit', 3)
    suggestions = generate_rationale_suggestions(emp, STATE['currentRange'], STATE['offer'],
                                                 STATE['strategy'].value, STATE['promotionRange'])
    return jsonify({'suggestions': suggestions[:limit], 'total': len(suggestions)})


@app.route('/api/proposal')
def api_proposal():
    if not STATE['loaded']: return _not_loaded()
    proposal = STATE['proposal'] or empty_proposal()
    return jsonify({
        'strategy': STATE['strategy'].value,
        'proposal': proposal,
        'hasProposal': not is_empty(proposal),
        'aiInsight': STATE['aiSuggestion'],
    })


@app.route('/api/comparison')
def api_comparison():
    if not STATE['loaded']: return _not_loaded()
    emp = STATE['employee']; offer = STATE['offer']
    if not emp or not has_offer(offer):
        return jsonify({'error': 'Select an employee and enter a competing offer first'}), 400
    try:
        proposal = None if is_empty(STATE['proposal']) else STATE['proposal']
        return jsonify(build_comparison(emp, offer, proposal, STATE['currentRange'],
                                        STATE['promotionRange'],
                                        STATE['data']['params'].get('exchangeRate')))
    except Exception as e:
        logger.exception("Comparison build failed")
        return jsonify({'status': 'error', 'message': str(e)}), 500


@app.route('/api/refresh', methods=['POST'])
def api_refresh():
    """Reload datasets and parameters, resetting every selection."""
    try:
        STATE['loaded'] = False
        STATE['_load_error'] = None
        _run_all()
        return jsonify({'status': 'ok', 'message': 'Datasets reloaded',
                        'employeeCount': STATE['data']['employeeCount'],
                        'rangeCount': STATE['data']['rangeCount']})
    except Exception as e:
        STATE['_load_error'] = f"{type(e).__name__}: {e}"
        logger.exception("Refresh failed")
        return jsonify({'status': 'error', 'message': str(e)}), 500


if __name__ == '__main__':
    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO'),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app.run(debug=False, host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
