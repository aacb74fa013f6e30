"""Domain layer - commands, replies, tabular results and the services between them."""
