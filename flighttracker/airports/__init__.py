"""
Static airport reference data.

lookup.py       Process-wide, read-only IATA -> coordinates table
preprocess.py   Offline CSV -> JSON generator for that table
"""

from flighttracker.airports.lookup import AirportRecord, AirportTable, airport_table

__all__ = ['AirportRecord', 'AirportTable', 'airport_table']
