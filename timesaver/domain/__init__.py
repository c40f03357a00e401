"""Domain layer - calculator inputs, results, analytics events and leads.

Plain pydantic models with no dependency on the web framework or the
event sink backends.
"""
