"""Command-line interface for BROKERBOOT."""
