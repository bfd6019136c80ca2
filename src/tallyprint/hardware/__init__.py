"""Hardware transports for tallyprint."""
