"""
Audio Relay package.

Provides:
- A job relay that submits generation requests to a Replicate-style
  prediction API and waits for asynchronous jobs to finish
- A FastAPI front end with an origin allow-list for the web client
"""

__version__ = "1.0.0"
