"""HTTP endpoint module for rconweb.

Serves the single command route the console transport talks to, plus a
health check and the console's static configuration. Commands are
relayed to the RCON server one connection per request.
"""
