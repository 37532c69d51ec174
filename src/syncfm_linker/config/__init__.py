"""Configuration for the SyncFM Linker service."""
