"""Appointment availability calculator for the booking site."""
