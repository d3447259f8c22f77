"""Fileforge CLI — Typer-based command-line interface.

Drives the reconciler against a local directory backend: create, read and
delete files from a desired-state JSON document, parse import IDs and
preview content type inference.

All output uses Rich for formatted terminal display.
"""
