"""Conversation parsing, metadata assembly, and Memphora record handling."""
