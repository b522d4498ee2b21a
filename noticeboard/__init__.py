"""Campus noticeboard backend (announcements feed + single admin)."""
