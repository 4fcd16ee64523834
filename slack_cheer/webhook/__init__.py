"""Cheer bot webhook subpackage.

Contains the FastAPI app factory and routes, the ingestion boundary for Slack
Events API envelopes, the queued event handler and the CLI entry point.
"""
