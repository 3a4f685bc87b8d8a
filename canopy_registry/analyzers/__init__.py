"""Analyzers — static extraction of artifact metadata from source text.

- source_analyzer: pattern extractors producing a per-file fact sheet
- metadata: merges fact sheets with classification tables into records
"""
