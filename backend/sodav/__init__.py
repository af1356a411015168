"""SODAV Monitor API package — airplay monitoring backend core.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
