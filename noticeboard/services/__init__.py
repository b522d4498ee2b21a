"""
High-level use cases for the noticeboard API.

Each service module orchestrates the record store and external capabilities
(summarizer, image store) to implement the business rules. Routers call these
services instead of manipulating the JSON document or sessions directly.
"""
