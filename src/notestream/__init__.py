"""
NoteStream Backend - Notes with REST, GraphQL and realtime push

Users register and log in, keep tagged text notes, and every connected
session is told live when a note is added, updated or deleted.

Version: 1.0.0
"""

__version__ = "1.0.0"
