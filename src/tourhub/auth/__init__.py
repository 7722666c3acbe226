"""Authentication and authorization.

Learn: Identity is established by the client's identity provider; the
frontend then exchanges the verified email for one of our short-lived
JWTs (POST /api/jwt) and sends it as `Authorization: Bearer <token>`.

Three layers, always applied in this order:
1. Verifier  — get_current_identity: token → CurrentIdentity (401)
2. Role      — require_admin: identity's User must have role "admin" (403)
3. Ownership — ensure_self: target email must be the identity's (403)
"""
