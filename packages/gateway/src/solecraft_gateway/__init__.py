"""SoleCraft request gateway.

Wraps every call to the SoleCraft backend in an explicit middleware chain
(bearer-token injection, session-expiry handling) and exposes the session
facade the rest of the client uses to log in, log out and check auth state.
"""
