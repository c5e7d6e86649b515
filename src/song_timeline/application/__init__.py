"""
Application Layer

Contains use cases, the action protocol, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: Player actions and the dispatcher that routes them
- services/: Application services for room orchestration
- interfaces/: Port interfaces for infrastructure adapters
"""
