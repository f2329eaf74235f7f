"""Trust and abuse layer for a federated discussion forum."""
