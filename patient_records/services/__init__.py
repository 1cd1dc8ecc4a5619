"""Business logic returning explicit results."""
