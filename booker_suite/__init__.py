"""Restful Booker end-to-end suite."""
