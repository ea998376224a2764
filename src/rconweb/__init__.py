"""rconweb -- Browser-style console for Minecraft RCON servers.

The package pairs a small HTTP endpoint, which relays one command per
request to an RCON server, with a console core that dispatches commands,
decodes the server's formatting codes, classifies replies and keeps a
history of exchanges.
"""

__version__ = "0.1.0"
