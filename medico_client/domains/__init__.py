"""Workflow domains: appointments, documents, auth."""
