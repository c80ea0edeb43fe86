"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (the JSON file
store, tenant partitions, settings, errors, timestamps). Keep feature-specific
record handling in the corresponding feature package (e.g. `locations/`).
"""
