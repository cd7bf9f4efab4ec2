"""Feature packages of neo-authz."""
