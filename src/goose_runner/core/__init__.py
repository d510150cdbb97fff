"""Session, handoff and radio operations."""
