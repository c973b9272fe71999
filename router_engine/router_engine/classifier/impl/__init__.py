"""Classifier implementations."""
