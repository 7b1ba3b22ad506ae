"""Eligibility rules and job search filters."""
