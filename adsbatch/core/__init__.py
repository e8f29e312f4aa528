"""Core building blocks: configuration, logging, errors and batch jobs."""
