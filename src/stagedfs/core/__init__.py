"""Core types for stagedfs: errors, constants and schemas."""
