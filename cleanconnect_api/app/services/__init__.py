"""
Service layer.

Each service owns the SQL for one domain (clients, providers, jobs,
reviews, catalog) and raises ``core.errors`` exceptions that the global
handlers turn into error responses.  Endpoint modules stay thin.
"""
