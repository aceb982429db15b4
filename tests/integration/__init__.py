"""
Integration Tests Package

End-to-end tests driving the AnalysisSpace facade the way a host does.

TEST AXIOMS:
=============
1. The host only talks to the facade
2. Virtual time makes panel transitions deterministic
3. Nothing stays subscribed after unmount
"""
