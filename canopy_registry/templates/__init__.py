"""Templates — named visual themes published as per-group token files.

- schema / schema_validator: the structural contract for ``template.json``
- processor: splits a definition into token files plus ``metadata.json``
"""
