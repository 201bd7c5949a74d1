"""
medico_client

Client-side orchestration of the Sara Medico scheduling and records service:
appointment lifecycle, document ingestion, and password-recovery workflows.
"""

__version__ = "0.1.0"
