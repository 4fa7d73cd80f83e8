"""Test suite for the zapscript package.

This package contains unit and integration tests validating the
character cursor, every sub-grammar scanner, the top-level dispatcher,
expression evaluation, typed advanced arguments and the CLI.
"""
