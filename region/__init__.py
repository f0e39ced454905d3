"""Region-based reconciliation of DHT op sets between peers."""
