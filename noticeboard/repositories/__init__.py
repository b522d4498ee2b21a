"""
Persistence adapters.

The JSON document on disk is owned by `json_storage.JsonStorage`; services
depend on it instead of touching the file.
"""
