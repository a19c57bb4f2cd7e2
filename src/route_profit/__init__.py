"""
Route Profit - route profitability analysis for Airline Club.

Scans untapped routes out of an operator's home bases, prices each one
against the aircraft the operator owns, and ranks them by weekly
profit per frequency.
"""
