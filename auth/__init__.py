"""auth/ -- Authentication subsystem for the user management service.

Password hashing, JWT issuance/verification, the session registry, the
request auth gate, and the login/logout flow. The credential store lives here
too because login is its only non-CRUD consumer.

Layer rule: auth/ imports only core/, stdlib, and third-party libraries.
It does NOT import from api/. api/ imports from auth/, not the other way around.
"""
