"""Front end: sessions, the interactive shell and error reporting."""
