"""Operational scripts for the perishable inventory store."""
