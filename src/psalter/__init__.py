"""Czech Psalter: comparison data for medieval Czech psalter manuscripts."""

__version__ = "0.1.0"
