"""Test suite for the pet-sounds package.

This package contains unit and integration tests validating document
parsing, the two decoding passes, expression evaluation, plugins and
the command-line interface.
"""
