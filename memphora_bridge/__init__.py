"""Memphora Bridge: conversation normalization and memory actions for Memphora."""
