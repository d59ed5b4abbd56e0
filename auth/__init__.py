"""
auth — User authentication module.

Provides:
  • JWT issuance & verification (``auth.tokens``)
  • Password hashing (bcrypt, work factor 10)
  • Register / Login / isAuthorized API routes
  • ``get_current_user_id`` and ``require_account`` FastAPI dependencies
"""
