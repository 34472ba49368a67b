"""Authentication and authorization.

Users sign up / log in with username + password and receive a JWT.
Every records request presents that JWT as a bearer token; the access
guard turns it into a CurrentIdentity that scopes all record queries.
"""
