"""Commons package - settings, telemetry and storage providers shared by the API and the worker."""
