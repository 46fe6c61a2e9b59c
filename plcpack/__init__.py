"""plcpack — package TwinCAT PLC projects into NuGet archives."""

__version__ = "0.1.0"
