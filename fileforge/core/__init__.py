"""Reconciliation core: source resolution, classification, upload routing, drift."""
