# limits/__init__.py
"""
Limits app - revenue totals against the calendar-year and rolling
365-day turnover ceilings.
"""
