"""Booking services and their collaborators."""
