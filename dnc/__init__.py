"""dnc - divide-and-conquer task trees for agents and humans."""

__version__ = "1.0.0"
