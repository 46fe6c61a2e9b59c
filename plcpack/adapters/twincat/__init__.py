"""TwinCAT XAE automation interface adapter."""
