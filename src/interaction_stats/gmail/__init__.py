"""Gmail API integration."""
