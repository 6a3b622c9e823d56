"""
Device Sync Backend
===================

This is the Python package for the telemetry ingestion API.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a location fix / call log / SMS look like?)
- services/  = Workers (store records, filter by watermark, issue tokens, ping)
- routers/   = API endpoints (the doors into our app)
- config.py  = Settings pulled from the environment
- main.py    = Puts it all together and starts the server
"""

__version__ = "1.0.0"
