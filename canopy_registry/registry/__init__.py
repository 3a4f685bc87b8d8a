"""Registry — the published document set and the pipeline that builds it.

The registry provides:
- Records: immutable per-artifact metadata (models)
- Storage: paths and URLs keyed by (kind, name) over the registry tree (store)
- Aggregation: kind-level API documents and the master index (assembler)
- Orchestration: the build run over a source tree (builder)
"""
