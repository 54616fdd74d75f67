"""
auth — Account credentials and session tokens.

Provides:
  • Password hashing (bcrypt)
  • Opaque bearer tokens stored by digest
  • Credential and session stores (SQLAlchemy)
  • ``AuthGateway`` orchestrating signup / login / logout / password change
  • ``get_current_user_id`` FastAPI dependency
"""
