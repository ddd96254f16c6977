"""Availability and rate resolution for travel inventory options."""
