"""Core domain logic for lifecycle health-event scheduling.

This package contains the business logic and domain models,
isolated from external dependencies for easy testing and reasoning.
"""
