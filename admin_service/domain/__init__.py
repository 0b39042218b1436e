"""Domain model and workflows for the account hierarchy."""
