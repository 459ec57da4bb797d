"""chunkstore tests package.

Houses unit tests for:
- chunk codec and reference tags
- strategy selection and transaction preparation
- relay retry/submission
- read path and configuration

This file ensures pytest package discovery is consistent.
"""
