"""Reproducible extension repository fixtures for integration tests."""
