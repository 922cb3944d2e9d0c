"""German/English vocabulary drilling service."""
