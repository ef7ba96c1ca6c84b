"""Provider specific wire models; none of these leave the routing package."""
