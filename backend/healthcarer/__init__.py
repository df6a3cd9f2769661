"""Carer appointment slots service."""
