"""
Retention Calculator: Data Loader
Reads the employee directory, the compensation range taxonomy and the dashboard
parameters from Excel exports under data/. Every source falls back to the
built-in demo directory when its workbook is missing or unreadable, so the
dashboard always starts.
"""
import os, logging
from datetime import datetime, date
import openpyxl

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'data')

# ── Demo directory (HRIS dump stand-in) ──
DEMO_EMPLOYEES = [
    {'id': '1', 'name': 'Priya Sharma', 'email': 'priya.sharma@company.com',
     'department': 'Engineering', 'jobTitle': 'Senior Software Engineer',
     'jobFamily': 'Technology', 'jobSubFamily': 'Software Development', 'level': '4',
     'currentSalary': 2272755, 'variablePay': 227275, 'variablePercentage': 10,
     'ctc': 2500030, 'hireDate': '2021-03-15'},
    {'id': '2', 'name': 'Rahul Gupta', 'email': 'rahul.gupta@company.com',
     'department': 'Product', 'jobTitle': 'Product Manager',
     'jobFamily': 'Product Management', 'jobSubFamily': 'Product Strategy', 'level': '3',
     'currentSalary': 1800000, 'variablePay': 270000, 'variablePercentage': 15,
     'ctc': 2070000, 'hireDate': '2020-08-20'},
    {'id': '3', 'name': 'Anita Singh', 'email': 'anita.singh@company.com',
     'department': 'Design', 'jobTitle': 'UX Designer',
     'jobFamily': 'Design', 'jobSubFamily': 'User Experience', 'level': '3',
     'currentSalary': 1500000, 'variablePay': 150000, 'variablePercentage': 10,
     'ctc': 1650000, 'hireDate': '2022-01-10'},
    {'id': '4', 'name': 'Vikram Patel', 'email': 'vikram.patel@company.com',
     'department': 'Engineering', 'jobTitle': 'Staff Software Engineer',
     'jobFamily': 'Technology', 'jobSubFamily': 'Software Development', 'level': '5',
     'currentSalary': 3200000, 'variablePay': 480000, 'variablePercentage': 15,
     'ctc': 3680000, 'hireDate': '2019-05-12'},
    {'id': '5', 'name': 'Meera Reddy', 'email': 'meera.reddy@company.com',
     'department': 'Marketing', 'jobTitle': 'Marketing Manager',
     'jobFamily': 'Marketing', 'jobSubFamily': 'Digital Marketing', 'level': '3',
     'currentSalary': 1600000, 'variablePay': 240000, 'variablePercentage': 15,
     'ctc': 1840000, 'hireDate': '2021-09-05'},
]

# ── Global job taxonomy: (title, family, sub-family, level, min, mid, max, variable %) ──
_RANGE_TABLE = [
    ('Junior Software Engineer', 'Technology', 'Software Development', '2', 800000, 1200000, 1600000, 8),
    ('Software Engineer', 'Technology', 'Software Development', '3', 1400000, 1800000, 2200000, 10),
    ('Senior Software Engineer', 'Technology', 'Software Development', '4', 2000000, 2500000, 3000000, 12),
    ('Staff Software Engineer', 'Technology', 'Software Development', '5', 2800000, 3500000, 4200000, 15),
    ('Principal Software Engineer', 'Technology', 'Software Development', '6', 3800000, 4800000, 5800000, 18),
    ('Associate Product Manager', 'Product Management', 'Product Strategy', '2', 1200000, 1500000, 1800000, 12),
    ('Product Manager', 'Product Management', 'Product Strategy', '3', 1600000, 2000000, 2400000, 15),
    ('Senior Product Manager', 'Product Management', 'Product Strategy', '4', 2200000, 2800000, 3400000, 18),
    ('Principal Product Manager', 'Product Management', 'Product Strategy', '5', 3000000, 3800000, 4600000, 20),
    ('Junior UX Designer', 'Design', 'User Experience', '2', 800000, 1100000, 1400000, 8),
    ('UX Designer', 'Design', 'User Experience', '3', 1200000, 1600000, 2000000, 10),
    ('Senior UX Designer', 'Design', 'User Experience', '4', 1800000, 2300000, 2800000, 12),
    ('Marketing Specialist', 'Marketing', 'Digital Marketing', '2', 800000, 1200000, 1600000, 10),
    ('Marketing Manager', 'Marketing', 'Digital Marketing', '3', 1400000, 1800000, 2200000, 15),
    ('Senior Marketing Manager', 'Marketing', 'Digital Marketing', '4', 2000000, 2600000, 3200000, 18),
]

RANGE_FIELDS = ('jobTitle', 'jobFamily', 'jobSubFamily', 'level',
                'minSalary', 'midSalary', 'maxSalary', 'variablePercentage')

DEMO_RANGES = [dict(zip(RANGE_FIELDS, row)) for row in _RANGE_TABLE]

# Workbook header -> record key
EMPLOYEE_COLUMNS = {
    'Employee ID': 'id', 'Name': 'name', 'Email': 'email', 'Department': 'department',
    'Job Title': 'jobTitle', 'Job Family': 'jobFamily', 'Job Sub-Family': 'jobSubFamily',
    'Level': 'level', 'Base Salary': 'currentSalary', 'Variable Pay': 'variablePay',
    'Variable %': 'variablePercentage', 'CTC': 'ctc', 'Hire Date': 'hireDate',
}
RANGE_COLUMNS = {
    'Job Title': 'jobTitle', 'Job Family': 'jobFamily', 'Job Sub-Family': 'jobSubFamily',
    'Level': 'level', 'Min Salary': 'minSalary', 'Mid Salary': 'midSalary',
    'Max Salary': 'maxSalary', 'Variable %': 'variablePercentage',
}
_NUMERIC = {'currentSalary', 'variablePay', 'variablePercentage', 'ctc',
            'minSalary', 'midSalary', 'maxSalary'}


def read_xlsx_sheet(filepath, sheet_name=None):
    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    ws = wb[sheet_name] if sheet_name else wb.active
    rows = list(ws.iter_rows(values_only=True))
    wb.close()
    if len(rows) < 2:
        return []
    headers = [str(h).strip() if h else f'col_{i}' for i, h in enumerate(rows[0])]
    return [dict(zip(headers, row)) for row in rows[1:]]


def _to_number(val):
    if val is None or val == '':
        return 0
    if isinstance(val, (int, float)):
        return val
    try:
        return float(str(val).replace(',', '').strip())
    except ValueError:
        return 0


def _to_level(val):
    # Excel hands back 4.0 for a level typed as 4
    if isinstance(val, float) and val.is_integer():
        val = int(val)
    return str(val).strip() if val is not None else ''


def _to_iso_date(val):
    if isinstance(val, (datetime, date)):
        return val.strftime('%Y-%m-%d')
    return str(val).strip() if val else ''


def _map_row(row, columns):
    rec = {}
    for header, key in columns.items():
        val = row.get(header)
        if key in _NUMERIC:
            rec[key] = _to_number(val)
        elif key == 'level':
            rec[key] = _to_level(val)
        elif key == 'hireDate':
            rec[key] = _to_iso_date(val)
        else:
            rec[key] = str(val).strip() if val is not None else ''
    return rec


def load_parameters():
    """Load dashboard parameters from config/parameters.xlsx over the defaults."""
    path = os.path.join(DATA_DIR, 'config', 'parameters.xlsx')
    p = _default_params()
    if not os.path.exists(path):
        return p
    rows = read_xlsx_sheet(path)
    param_map = {
        'Company Name': 'companyName', 'Currency': 'currency',
        'Exchange Rate (per USD)': 'exchangeRate', 'Default Strategy': 'defaultStrategy',
        'Rationale Sentences': 'rationaleLimit', 'Suggested Rationales': 'suggestionLimit',
    }
    for row in rows:
        key = str(row.get('Parameter', '')).strip()
        val = row.get('Value')
        if key in param_map and val is not None:
            mapped = param_map[key]
            if mapped in ('companyName', 'currency', 'defaultStrategy'):
                val = str(val).strip()
            elif mapped in ('rationaleLimit', 'suggestionLimit'):
                val = int(_to_number(val))
            else:
                val = float(_to_number(val))
            p[mapped] = val
    return p


def _default_params():
    return {
        'companyName': 'Company', 'currency': 'INR', 'exchangeRate': 85.5,
        'defaultStrategy': 'competitive',
        # sentences appended after the strategy lead / offered in the editor
        'rationaleLimit': 2, 'suggestionLimit': 3,
    }


def load_employees():
    path = os.path.join(DATA_DIR, 'employees.xlsx')
    if not os.path.exists(path):
        return [dict(e) for e in DEMO_EMPLOYEES]
    try:
        rows = read_xlsx_sheet(path, 'Employees')
    except (OSError, KeyError, ValueError) as exc:
        logger.warning("Employee workbook unreadable (%s), using demo directory", exc)
        return [dict(e) for e in DEMO_EMPLOYEES]
    employees = []
    for i, r in enumerate(rows, 1):
        if not r.get('Name'):
            continue
        rec = _map_row(r, EMPLOYEE_COLUMNS)
        rec['id'] = rec['id'] or str(i)
        if not rec['ctc']:
            rec['ctc'] = rec['currentSalary'] + rec['variablePay']
        employees.append(rec)
    return employees if employees else [dict(e) for e in DEMO_EMPLOYEES]


def load_ranges():
    path = os.path.join(DATA_DIR, 'ranges.xlsx')
    if not os.path.exists(path):
        return [dict(r) for r in DEMO_RANGES]
    try:
        rows = read_xlsx_sheet(path, 'Ranges')
    except (OSError, KeyError, ValueError) as exc:
        logger.warning("Range workbook unreadable (%s), using demo taxonomy", exc)
        return [dict(r) for r in DEMO_RANGES]
    ranges = [_map_row(r, RANGE_COLUMNS) for r in rows if r.get('Job Title')]
    return ranges if ranges else [dict(r) for r in DEMO_RANGES]


def run_etl():
    """Load every dataset the dashboard needs."""
    params = load_parameters()
    employees = load_employees()
    ranges = load_ranges()
    logger.info("Loaded %d employees and %d compensation ranges", len(employees), len(ranges))
    return {
        'employees': employees, 'ranges': ranges, 'params': params,
        'employeeCount': len(employees), 'rangeCount': len(ranges),
    }
