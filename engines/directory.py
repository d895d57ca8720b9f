"""
Retention Calculator: Employee Directory & Range Lookup
Search over the employee directory and the current-range / promotion-range
cascade over the compensation taxonomy.
"""

SEARCH_FIELDS = ('name', 'email', 'department')


def search_employees(employees, term):
    term = (term or '').strip().lower()
    if not term:
        return []
    return [e for e in employees
            if any(term in str(e.get(f, '')).lower() for f in SEARCH_FIELDS)]


def find_employee(employees, employee_id):
    for e in employees:
        if str(e['id']) == str(employee_id):
            return e
    return None


def find_current_range(employee, ranges):
    """The range matching the employee's title, family, sub-family and level."""
    if not employee:
        return None
    for r in ranges:
        if (r['jobTitle'] == employee['jobTitle'] and r['jobFamily'] == employee['jobFamily']
                and r['jobSubFamily'] == employee['jobSubFamily'] and r['level'] == employee['level']):
            return r
    return None


def _level(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def find_promotion_ranges(current_range, ranges):
    """Ranges one level up within the same job family."""
    if not current_range:
        return []
    current_level = _level(current_range['level'])
    if current_level is None:
        return []
    return [r for r in ranges
            if r['jobFamily'] == current_range['jobFamily'] and _level(r['level']) == current_level + 1]


def find_range(ranges, job_title, level=None):
    for r in ranges:
        if r['jobTitle'] == job_title and (level is None or str(r['level']) == str(level)):
            return r
    return None
