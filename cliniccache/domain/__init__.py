"""Domain Layer: value objects, entry models, exceptions and interfaces."""
