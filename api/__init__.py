"""HTTP schemas and routers for the interview service."""
