"""Church ushering scheduler service."""
