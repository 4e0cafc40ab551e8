"""Deployment targets, credentials and staging repositories."""
