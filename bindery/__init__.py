"""Print-ready book cover and interior templates"""

__version__ = "0.1.0"
