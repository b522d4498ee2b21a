"""Data model and field validation for announcements and users."""
