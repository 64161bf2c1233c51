"""
Service layer.

Services hold the SQL for each resource and the input validation that
runs before it.  API handlers call into them and translate the results
into HTTP responses.
"""
