"""
Posts Gateway service package.

An HTTP facade over an upstream posts/comments API. It exposes subpackages
for API routers, core utilities, the upstream integration, schemas and the
service layer.
"""
