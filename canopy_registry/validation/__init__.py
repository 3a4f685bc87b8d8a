"""Validation — read-side checks over a built registry tree.

- integrity: structure, record fields, file references and index consistency
- report: headline statistics read from the index
"""
