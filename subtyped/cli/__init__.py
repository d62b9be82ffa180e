# CLI package for subtyped
"""
Command-line interface for checking values against registered predicates.

Commands:
    subtyped list    — Show registered predicates
    subtyped check   — Verify a JSON value against a predicate
"""
