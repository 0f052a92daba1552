"""auth/ -- Authentication and authorization package for TaskReview.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or assignments/.
api/ imports from auth/, not the other way around.
"""
