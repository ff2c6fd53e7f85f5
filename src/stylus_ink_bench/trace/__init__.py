"""
Trace - stylusTracer output model and ink extraction.
"""
