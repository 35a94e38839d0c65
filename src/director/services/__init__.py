"""Service layer - business logic over the automation store."""
