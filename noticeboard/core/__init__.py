"""
Core utilities shared across the noticeboard API.

Configuration, password hashing, login throttling and logging setup live
here so routers/services do not read os.environ or configure handlers
themselves.
"""
