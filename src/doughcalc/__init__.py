"""Pizza dough calculator: baker's-percentage formulas and fermentation timelines."""

__version__ = "0.1.0"
