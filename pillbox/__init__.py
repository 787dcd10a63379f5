"""Household medication tracker: weekly intake planner and two-location pill inventory."""
__version__ = "1.0.0"
