"""
Thin Azure client libraries: MySQL recommended actions, Azure Monitor export, storage
queues, Cognitive Search and deployment scripts, all on top of azrest.core.
"""

__version__ = "0.1.0"
