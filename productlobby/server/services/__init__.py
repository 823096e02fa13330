"""
Server services.

Database-backed glue between the repositories and the pure calculators in
``productlobby.scoring``, plus the request dependencies route handlers use.
"""
