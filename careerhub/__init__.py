"""
CareerHub
Job and internship marketplace backend with a realtime messaging layer.

Architecture:
- MongoDB: Profiles, messages, conversations, notifications
- FastAPI: REST API under /api and the realtime WebSocket at /ws
- Realtime hub: in-memory presence, best-effort delivery (no queueing)
"""

__version__ = "1.0.0"
