"""Services — imperative shell around the pure core.

Invariants:
    - Services own all IO (database, identity provider)
    - Access denials computed in core/ are raised here as SodavError subclasses
"""
