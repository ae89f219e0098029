"""Build tooling for the mls-rs uniffi iOS XCFramework."""

__version__ = "0.1.0"
